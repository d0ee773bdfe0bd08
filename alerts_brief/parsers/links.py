"""
Helpers shared by the alert link parsers.
"""

from typing import Optional
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup

EXCLUDED_DOMAINS = ("google.com", "googleusercontent.com", "feedproxy.google.com")


def clean_html(raw_html: Optional[str]) -> str:
    """Removes HTML tags and entities from a string."""
    if not raw_html:
        return ""
    text = BeautifulSoup(raw_html, "html.parser").get_text(" ", strip=True)
    return " ".join(text.split())


def unwrap_redirect(url: str) -> str:
    """Decodes Google redirect links (google.com/url?...&url=<target>)."""
    parsed = urlparse(url)
    if "google.com" in parsed.netloc and parsed.path == "/url":
        params = parse_qs(parsed.query)
        for key in ("url", "q"):
            if params.get(key):
                return params[key][0]
    return url


def is_article_url(url: str) -> bool:
    """True for http(s) links that do not point back at Google."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    host = parsed.netloc.lower()
    return not any(domain in host for domain in EXCLUDED_DOMAINS)
