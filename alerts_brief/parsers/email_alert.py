"""
Google Alerts email parser.

This module extracts article links from the HTML body of an alert email.
"""

import re
from typing import List

from bs4 import BeautifulSoup

from alerts_brief.models import ArticleLink
from alerts_brief.parsers.links import is_article_url, unwrap_redirect

_SUBJECT_TOPIC = re.compile(r"Google Alert\s*-\s*(.+)", re.IGNORECASE)


def extract_topic(subject: str) -> str:
    """Topic from a subject such as 'Google Alert - agentic commerce'."""
    match = _SUBJECT_TOPIC.search(subject or "")
    return match.group(1).strip() if match else "unknown"


def parse_alert_email(body_html: str, subject: str) -> List[ArticleLink]:
    """Returns the unique article links in an alert email, in order."""
    topic = extract_topic(subject)
    links: List[ArticleLink] = []
    seen = set()

    soup = BeautifulSoup(body_html or "", "html.parser")
    for anchor in soup.select("a[href]"):
        url = unwrap_redirect(anchor["href"].strip())
        title = anchor.get_text(" ", strip=True)
        if not title or not is_article_url(url) or url in seen:
            continue
        seen.add(url)
        links.append({"url": url, "title": " ".join(title.split()), "topic": topic})

    return links
