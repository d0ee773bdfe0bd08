"""
Google Alerts RSS feed parser.

This module provides the AlertFeedParser class for fetching alert feeds
delivered as RSS/Atom instead of email.
"""

import logging
from typing import List

import requests
import feedparser  # type: ignore

from alerts_brief.models import ArticleLink
from alerts_brief.parsers.base import LinkSource
from alerts_brief.parsers.links import clean_html, is_article_url, unwrap_redirect

logger = logging.getLogger(__name__)


class AlertFeedParser(LinkSource):
    """Parses Google Alerts feeds into article links."""

    def fetch(self, topic: str, url: str) -> List[ArticleLink]:
        """Fetches and parses a single alert feed."""
        items: List[ArticleLink] = []
        seen = set()
        try:
            # Add a user-agent to prevent 403s
            try:
                resp = requests.get(
                    url, timeout=10, headers={"User-Agent": "AlertsBriefBot/1.0"}
                )
                resp.raise_for_status()
                feed_content = resp.content
            except requests.RequestException as req_err:
                logger.error("Network error fetching %s: %s", topic, req_err)
                return []

            feed = feedparser.parse(feed_content)
            for entry in feed.entries:
                link = unwrap_redirect(entry.link if hasattr(entry, "link") else "")
                # Alert titles carry <b> highlighting around the matched terms
                title = clean_html(entry.title if hasattr(entry, "title") else "")
                if not is_article_url(link) or link in seen:
                    continue
                seen.add(link)
                items.append({"url": link, "title": title or "Untitled", "topic": topic})
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error parsing %s: %s", topic, e)
        return items
