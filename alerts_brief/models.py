"""
Data models for the Alerts Brief application.
"""

from typing import List, Optional, TypedDict


class ArticleLink(TypedDict):
    """A candidate article link pulled out of an alert."""

    url: str
    title: str
    topic: str


class Article(TypedDict):
    """Type definition for a scraped article."""

    url: str
    title: str
    source: str  # Domain the article was fetched from
    topic: str
    content: str
    published_date: str
    fetched_date: str


class _SourceReferenceBase(TypedDict):
    title: str
    url: str
    source: str


class SourceReference(_SourceReferenceBase, total=False):
    """A citation attached to a development."""

    resolved: bool  # False when no input article matched


class Development(TypedDict):
    """One consolidated story inside a brief."""

    development: str
    key_takeaways: List[str]
    sources: List[SourceReference]


class Brief(TypedDict):
    """The daily intelligence brief."""

    date: str
    executive_summary: str
    key_developments: List[Development]
    sentiment_summary: str
    trends: str
    what_to_watch: str
    article_count: int
    is_fallback: bool
    raw_ai_response: Optional[str]


# Briefs read back from storage have the same shape.
HistoricalBrief = Brief
