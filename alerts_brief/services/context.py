"""
Historical context for the brief prompt.

Condenses the most recent briefs into a short memory block so the model can
skip stories it already reported.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from alerts_brief.errors import ConfigError
from alerts_brief.models import HistoricalBrief


@dataclass(frozen=True)
class ContextLimits:
    """Caps on how much history is fed back into the prompt."""

    history_days: int = 7
    headline_briefs: int = 5
    max_headlines: int = 15
    watch_briefs: int = 3
    sentiment_briefs: int = 3
    sentiment_chars: int = 100

    @classmethod
    def from_config(cls, values: Dict[str, Any]) -> "ContextLimits":
        """Builds limits from the `context` section of config.json."""
        known = {}
        for key, value in values.items():
            if key not in cls.__dataclass_fields__:
                continue
            try:
                known[key] = int(value)
            except (TypeError, ValueError):
                raise ConfigError(f"context.{key} must be an integer") from None
        return cls(**known)


def _headline(development: Any) -> str:
    # Older briefs stored developments as plain strings.
    if isinstance(development, dict):
        return str(development.get("development", "")).strip()
    return str(development).strip()


def build_context(
    history: Sequence[HistoricalBrief], limits: ContextLimits = ContextLimits()
) -> str:
    """Renders prior briefs (newest first) into a prompt memory block."""
    briefs = list(history)[: limits.history_days]
    if not briefs:
        return ""

    sections: List[str] = []

    headlines: List[str] = []
    for brief in briefs[: limits.headline_briefs]:
        for dev in brief.get("key_developments") or []:
            text = _headline(dev)
            if text:
                headlines.append(f"- [{brief['date']}] {text}")
    headlines = headlines[: limits.max_headlines]
    if headlines:
        sections.append("Developments already reported:\n" + "\n".join(headlines))

    watch = [
        f"- [{b['date']}] {b['what_to_watch'].strip()}"
        for b in briefs[: limits.watch_briefs]
        if (b.get("what_to_watch") or "").strip()
    ]
    if watch:
        sections.append("Previously flagged to watch:\n" + "\n".join(watch))

    sentiment = [
        f"- [{b['date']}] {b['sentiment_summary'].strip()[: limits.sentiment_chars]}"
        for b in briefs[: limits.sentiment_briefs]
        if (b.get("sentiment_summary") or "").strip()
    ]
    if sentiment:
        sections.append("Recent sentiment:\n" + "\n".join(sentiment))

    if not sections:
        return ""
    return "HISTORICAL CONTEXT (previous briefs, newest first):\n\n" + "\n\n".join(
        sections
    )
