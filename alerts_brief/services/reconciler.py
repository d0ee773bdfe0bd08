"""
Evidence reconciliation for model-cited sources.

The model usually gets article titles right but often drops or truncates the
URL. Each cited source is matched back to an input article through a chain
of increasingly loose matchers; the first match wins.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from alerts_brief.errors import ReconciliationGap
from alerts_brief.models import Article, Development, SourceReference

logger = logging.getLogger(__name__)

Matcher = Callable[[SourceReference, Sequence[Article]], Optional[Article]]


def is_absolute_url(url: Optional[str]) -> bool:
    """True for http:// and https:// URLs."""
    return bool(url) and url.strip().lower().startswith(("http://", "https://"))


def _norm(text: Optional[str]) -> str:
    return " ".join((text or "").split()).lower()


def match_exact_title(ref: SourceReference, articles: Sequence[Article]) -> Optional[Article]:
    """Article whose title equals the cited title, ignoring case."""
    title = _norm(ref.get("title"))
    if not title:
        return None
    for article in articles:
        if _norm(article.get("title")) == title:
            return article
    return None


def match_title_substring(
    ref: SourceReference, articles: Sequence[Article]
) -> Optional[Article]:
    """First article whose title contains, or is contained in, the cited title."""
    title = _norm(ref.get("title"))
    if not title:
        return None
    for article in articles:
        candidate = _norm(article.get("title"))
        if candidate and (candidate in title or title in candidate):
            return article
    return None


def match_domain_fragment(
    ref: SourceReference, articles: Sequence[Article]
) -> Optional[Article]:
    """First article whose URL or source contains the cited partial URL."""
    fragment = _norm(ref.get("url")).rstrip("/")
    if fragment.startswith("www."):
        fragment = fragment[len("www.") :]
    if not fragment:
        return None
    for article in articles:
        if fragment in _norm(article.get("url")) or fragment in _norm(article.get("source")):
            return article
    return None


MATCHERS: Tuple[Matcher, ...] = (
    match_exact_title,
    match_title_substring,
    match_domain_fragment,
)


def find_article(ref: SourceReference, articles: Sequence[Article]) -> Optional[Article]:
    """Runs the matchers in order and returns the first hit."""
    for matcher in MATCHERS:
        article = matcher(ref, articles)
        if article is not None:
            return article
    return None


def _as_reference(raw: Any) -> SourceReference:
    if raw is None:
        return {"title": "", "url": "", "source": ""}
    if isinstance(raw, str):
        return {"title": "", "url": raw, "source": ""}
    if not isinstance(raw, dict):
        return {"title": str(raw), "url": "", "source": ""}
    ref: SourceReference = {
        "title": str(raw.get("title") or ""),
        "url": str(raw.get("url") or ""),
        "source": str(raw.get("source") or ""),
    }
    if "resolved" in raw:
        ref["resolved"] = bool(raw["resolved"])
    return ref


def resolve_reference(
    ref: SourceReference, articles: Sequence[Article]
) -> Tuple[SourceReference, bool]:
    """Returns a grounded copy of `ref` and whether it was resolved."""
    if is_absolute_url(ref.get("url")):
        return {**ref, "url": ref["url"].strip(), "resolved": True}, True

    article = find_article(ref, articles)
    if article is None:
        return {**ref, "resolved": False}, False

    return (
        {
            "title": ref.get("title") or article["title"],
            "url": article["url"],
            "source": ref.get("source") or article["source"],
            "resolved": True,
        },
        True,
    )


def reference_from_article(article: Article) -> SourceReference:
    """Builds a source reference copied verbatim from an article."""
    return {
        "title": article["title"],
        "url": article["url"],
        "source": article["source"],
    }


def _clean_takeaways(headline: str, raw: Any) -> List[str]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    seen = {_norm(headline)}
    takeaways = []
    for item in raw:
        text = str(item).strip()
        key = _norm(text)
        if not key or key in seen:
            continue
        seen.add(key)
        takeaways.append(text)
    return takeaways


def reconcile_development(
    raw: Any, articles: Sequence[Article]
) -> Tuple[Development, List[ReconciliationGap]]:
    """Grounds every source of one development against the articles."""
    if isinstance(raw, dict):
        headline = str(raw.get("development") or raw.get("headline") or "").strip()
        raw_takeaways = raw.get("key_takeaways", [])
        raw_sources = raw.get("sources") or []
    else:
        headline, raw_takeaways, raw_sources = str(raw).strip(), [], []
    if not isinstance(raw_sources, list):
        raw_sources = [raw_sources]

    gaps: List[ReconciliationGap] = []
    sources: List[SourceReference] = []
    for raw_ref in raw_sources:
        ref, resolved = resolve_reference(_as_reference(raw_ref), articles)
        if not resolved:
            gaps.append(ReconciliationGap(headline, ref["title"], ref["url"] or None))
        sources.append(ref)

    if not sources and articles:
        sources.append({**reference_from_article(articles[0]), "resolved": True})

    development: Development = {
        "development": headline,
        "key_takeaways": _clean_takeaways(headline, raw_takeaways),
        "sources": sources,
    }
    return development, gaps


def reconcile_developments(
    developments: Sequence[Any], articles: Sequence[Article]
) -> Tuple[List[Development], List[ReconciliationGap]]:
    """
    Reconciles every development in order.

    Returns new developments (inputs are never modified) and a diagnostic
    for each source that could not be resolved. Unresolved sources are kept
    with `resolved: False`; no URL is ever invented.
    """
    reconciled: List[Development] = []
    gaps: List[ReconciliationGap] = []
    for raw in developments:
        development, dev_gaps = reconcile_development(raw, articles)
        reconciled.append(development)
        gaps.extend(dev_gaps)

    for gap in gaps:
        logger.warning("%s", gap)
    return reconciled, gaps
