"""
Base classes and interfaces for alert link sources.

This module defines the contract that all alert sources must follow.
"""

from typing import List, Protocol

from alerts_brief.models import ArticleLink


class LinkSource(Protocol):
    """
    Protocol for alert link sources.

    Classes implementing this protocol should be able to fetch an alert feed
    for a topic and turn it into a list of candidate article links.
    """

    def fetch(self, topic: str, url: str) -> List[ArticleLink]:
        """Fetches an alert feed and returns its article links."""
