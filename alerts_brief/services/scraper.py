"""
Article scraper.

Downloads each alert link and reduces the page to plain text.
"""

import concurrent.futures
import datetime
import logging
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from alerts_brief.models import Article, ArticleLink

logger = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 10000
MIN_CONTENT_CHARS = 100

_NOISE_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside"]
_CONTENT_SELECTORS = (
    "article",
    '[role="article"]',
    ".article-content",
    ".post-content",
    ".entry-content",
    "main",
    ".content",
)


class ArticleScraper:
    """Fetches article pages and extracts their readable text."""

    def __init__(self, timeout: int = 30, workers: int = 3):
        self.timeout = timeout
        self.workers = workers

    def _extract(self, page: str) -> Tuple[str, str]:
        soup = BeautifulSoup(page, "html.parser")
        heading = soup.find("h1") or soup.find("title")
        title = " ".join(heading.get_text(" ", strip=True).split()) if heading else ""

        for tag in soup(_NOISE_TAGS):
            tag.decompose()

        content = ""
        for selector in _CONTENT_SELECTORS:
            element = soup.select_one(selector)
            if element:
                content = element.get_text(" ", strip=True)
                if content:
                    break
        if not content:
            content = (soup.body or soup).get_text(" ", strip=True)
        return title, " ".join(content.split())

    def scrape(self, link: ArticleLink) -> Optional[Article]:
        """Scrapes a single link, returning None when the page is unusable."""
        try:
            resp = requests.get(
                link["url"],
                timeout=self.timeout,
                headers={
                    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
                    "AppleWebKit/537.36"
                },
            )
            resp.raise_for_status()
        except requests.RequestException as req_err:
            logger.error("Failed to scrape %s: %s", link["url"], req_err)
            return None

        title, content = self._extract(resp.text)
        if len(content) < MIN_CONTENT_CHARS:
            logger.info("Insufficient content for %s", link["url"])
            return None

        now = datetime.datetime.now(datetime.timezone.utc).isoformat()
        return {
            "url": link["url"],
            "title": title or link["title"],
            "source": urlparse(link["url"]).netloc.lower(),
            "topic": link["topic"],
            "content": content[:MAX_CONTENT_CHARS],
            "published_date": now,
            "fetched_date": now,
        }

    def scrape_many(self, links: List[ArticleLink]) -> List[Article]:
        """Scrapes links in parallel, preserving input order."""
        if not links:
            return []
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.workers) as executor:
            results = list(executor.map(self.scrape, links))
        articles = [a for a in results if a is not None]
        logger.info("Successfully scraped %d of %d articles.", len(articles), len(links))
        return articles
