"""
Hacker News link source.

This module provides the HackerNewsFetcher class, which reads the Hacker
News front page and asks the configured model which stories are relevant
to the brief's domain.
"""

import json
import logging
import re
from typing import Dict, List

import requests

from alerts_brief.errors import ProviderError
from alerts_brief.models import ArticleLink
from alerts_brief.parsers.links import is_article_url
from alerts_brief.providers.base import ModelBackend

logger = logging.getLogger(__name__)

HN_API = "https://hacker-news.firebaseio.com/v0"
HN_TOPIC = "hacker news"

_INDEX_ARRAY = re.compile(r"\[[\d,\s]*\]")

_FILTER_PROMPT = """
You are filtering Hacker News articles for relevance to: {domain}

Here are the article titles:
{items}

Return a JSON array of the numbers (1-indexed) of articles that are relevant to {domain}. Be selective - only include articles that are clearly related. If none are relevant, return an empty array.

Example response: [1, 5, 12]

Respond with only the JSON array, no other text.
"""


class HackerNewsFetcher:
    """Finds front-page Hacker News stories relevant to the domain."""

    def __init__(self, backend: ModelBackend, domain: str, limit: int = 30):
        self.backend = backend
        self.domain = domain
        self.limit = limit

    def _get_json(self, path: str):
        resp = requests.get(f"{HN_API}/{path}.json", timeout=10)
        resp.raise_for_status()
        return resp.json()

    def fetch_front_page(self) -> List[Dict[str, str]]:
        """Top stories that link to an external article."""
        items = []
        try:
            story_ids = self._get_json("topstories") or []
            for story_id in story_ids[: self.limit]:
                item = self._get_json(f"item/{story_id}")
                if item and item.get("url") and item.get("title"):
                    items.append({"title": item["title"], "url": item["url"]})
        except (requests.RequestException, ValueError) as e:
            logger.error("Network error fetching Hacker News: %s", e)
        return items

    def filter_relevant(self, items: List[Dict[str, str]]) -> List[Dict[str, str]]:
        """Keeps the items the model marks as relevant."""
        listing = "\n".join(f"{i}. {item['title']}" for i, item in enumerate(items, start=1))
        prompt = _FILTER_PROMPT.format(domain=self.domain, items=listing)
        try:
            response = self.backend.invoke(prompt)
        except ProviderError as e:
            logger.error("Hacker News relevance filter failed: %s", e)
            return []

        match = _INDEX_ARRAY.search(response)
        if not match:
            logger.warning("No index list in Hacker News filter response.")
            return []
        try:
            indices = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse Hacker News filter response: %s", e)
            return []

        selected = []
        seen = set()
        for index in indices:
            if 1 <= index <= len(items) and index not in seen:
                seen.add(index)
                selected.append(items[index - 1])
        return selected

    def fetch_relevant(self) -> List[ArticleLink]:
        """Relevant front-page stories as article links."""
        items = self.fetch_front_page()
        logger.info("Found %d items on the Hacker News front page.", len(items))
        if not items:
            return []

        relevant = self.filter_relevant(items)
        logger.info("Found %d relevant Hacker News article(s).", len(relevant))
        return [
            {"url": item["url"], "title": item["title"], "topic": HN_TOPIC}
            for item in relevant
            if is_article_url(item["url"])
        ]
