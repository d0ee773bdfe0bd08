"""
Database service for articles and briefs.

This module provides the BriefStore class which interfaces with Google
Firestore to deduplicate alert links, keep scraped articles, and store one
brief per day.
"""

import datetime
import hashlib
import logging
from typing import List, Optional

from google.cloud import firestore  # type: ignore

from alerts_brief.models import Article, ArticleLink, Brief, HistoricalBrief

logger = logging.getLogger(__name__)


class BriefStore:
    """Persists articles and briefs in Google Firestore."""

    def __init__(self, project_id: Optional[str]):
        if not project_id:
            logger.warning("GCP_PROJECT_ID not set. Storage disabled.")
            self.db = None
            return

        try:
            self.db = firestore.Client(project=project_id)
            self.articles = self.db.collection("articles")
            self.briefs = self.db.collection("daily_briefs")
            logger.info("Connected to Firestore.")
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Firestore connection failed: %s", e)
            self.db = None

    @property
    def enabled(self) -> bool:
        """True when Firestore is connected."""
        return self.db is not None

    def get_id(self, url: str) -> str:
        """Creates a deterministic hash of the URL."""
        return hashlib.md5(url.encode("utf-8")).hexdigest()

    def filter_new(self, links: List[ArticleLink]) -> List[ArticleLink]:
        """Returns only links whose article hasn't been stored yet."""
        if not self.db or not links:
            return links

        doc_refs = [self.articles.document(self.get_id(link["url"])) for link in links]

        # Process in chunks of 30 to stay within API limits
        chunk_size = 30
        seen_ids = set()

        for i in range(0, len(doc_refs), chunk_size):
            chunk = doc_refs[i : i + chunk_size]
            snapshots = self.db.get_all(chunk)
            for snap in snapshots:
                if snap.exists:
                    seen_ids.add(snap.id)

        new_links = []
        for link in links:
            lid = self.get_id(link["url"])
            if lid not in seen_ids:
                new_links.append(link)
                seen_ids.add(lid)

        logger.info(
            "Deduplication: %d links -> %d new (%d already stored).",
            len(links),
            len(new_links),
            len(links) - len(new_links),
        )
        return new_links

    def save_articles(self, articles: List[Article]) -> None:
        """Stores scraped articles keyed by URL."""
        if not self.db or not articles:
            return

        batch = self.db.batch()
        count = 0

        for article in articles:
            ref = self.articles.document(self.get_id(article["url"]))
            batch.set(ref, dict(article))
            count += 1

            # Firestore batches limited to 500 writes
            if count >= 400:
                batch.commit()
                batch = self.db.batch()
                count = 0

        if count > 0:
            batch.commit()
        logger.info("Saved %d articles.", len(articles))

    def get_recent_articles(self, days: int = 1) -> List[Article]:
        """Articles fetched in the last `days` days, newest first."""
        if not self.db:
            return []

        cutoff = (
            datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(days=days)
        ).isoformat()
        query = self.articles.where(
            filter=firestore.FieldFilter("fetched_date", ">=", cutoff)
        ).order_by("fetched_date", direction=firestore.Query.DESCENDING)
        return [doc.to_dict() for doc in query.stream()]

    def get_recent_briefs(self, limit: int = 7) -> List[HistoricalBrief]:
        """Most recent briefs, newest first."""
        if not self.db:
            return []

        query = self.briefs.order_by(
            "date", direction=firestore.Query.DESCENDING
        ).limit(limit)
        return [doc.to_dict() for doc in query.stream()]

    def save_brief(self, brief: Brief) -> None:
        """Stores the brief under its date, replacing any earlier run that day."""
        if not self.db:
            return

        record = dict(brief)
        record["created_date"] = datetime.datetime.now(datetime.timezone.utc).isoformat()
        self.briefs.document(brief["date"]).set(record)
        logger.info("Saved brief for %s.", brief["date"])
