"""
Intelligence brief synthesis.

This module provides the IntelligenceAnalyzer class, which turns the day's
articles and recent briefs into a validated, source-attributed brief using a
single model call, and falls back to a model-free brief when anything fails.
"""

import logging
from typing import Optional, Sequence

from alerts_brief.errors import BriefError
from alerts_brief.models import Article, Brief, HistoricalBrief
from alerts_brief.providers.base import ModelBackend
from alerts_brief.services.context import ContextLimits, build_context
from alerts_brief.services.extractor import parse_brief_payload, validate_shape
from alerts_brief.services.fallback import empty_brief, fallback_brief
from alerts_brief.services.prompt import compose_prompt
from alerts_brief.services.reconciler import reconcile_developments

logger = logging.getLogger(__name__)


class IntelligenceAnalyzer:
    """
    Synthesizes the daily brief.

    Each call to `synthesize` runs context building, prompt composition, one
    backend call, extraction and reconciliation in order. Exactly one brief
    is returned per call; failures produce a fallback brief instead.
    """

    def __init__(
        self,
        backend: ModelBackend,
        domain: str,
        limits: ContextLimits = ContextLimits(),
    ):
        self.backend = backend
        self.domain = domain
        self.limits = limits
        logger.info("Using AI provider: %s (%s)", backend.name, backend.model)

    def synthesize(
        self,
        articles: Sequence[Article],
        date: str,
        history: Sequence[HistoricalBrief] = (),
    ) -> Brief:
        """Builds the brief for `date` from `articles`."""
        articles = list(articles)
        if not articles:
            logger.info("No articles for %s. Skipping model call.", date)
            return empty_brief(date)

        raw_response: Optional[str] = None
        try:
            context = build_context(history, self.limits)
            prompt = compose_prompt(articles, self.domain, context)
            raw_response = self.backend.invoke(prompt)

            payload = parse_brief_payload(raw_response)
            validate_shape(payload)

            developments, gaps = reconcile_developments(
                payload["key_developments"], articles
            )
            if gaps:
                logger.warning(
                    "%d source(s) could not be matched to an article.", len(gaps)
                )

            return {
                "date": date,
                "executive_summary": str(payload["executive_summary"]),
                "key_developments": developments,
                "sentiment_summary": str(payload["sentiment_summary"]),
                "trends": str(payload["trends"]),
                "what_to_watch": str(payload["what_to_watch"]),
                "article_count": len(articles),
                "is_fallback": False,
                "raw_ai_response": raw_response,
            }
        except BriefError as e:
            logger.error("Failed to create intelligence brief: %s", e)
            if raw_response is not None:
                logger.debug("Raw response: %s", raw_response)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected error while creating brief: %s", e)

        return fallback_brief(articles, date, self.domain, raw_response)
