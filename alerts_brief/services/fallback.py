"""
Briefs built without the model.

Used when there is nothing to analyze or when synthesis fails. Everything
here is copied from the input articles, so the result is always valid.
"""

from typing import List, Optional, Sequence

from alerts_brief.models import Article, Brief, Development
from alerts_brief.services.reconciler import reference_from_article

MAX_FALLBACK_DEVELOPMENTS = 5
FALLBACK_SENTIMENT = "Neutral - Unable to perform detailed analysis"


def empty_brief(date: str) -> Brief:
    """Brief for a day with no new articles."""
    return {
        "date": date,
        "executive_summary": "No new articles found today.",
        "key_developments": [],
        "sentiment_summary": "Neutral",
        "trends": "No significant trends detected.",
        "what_to_watch": "Monitor for new developments.",
        "article_count": 0,
        "is_fallback": False,
        "raw_ai_response": None,
    }


def fallback_brief(
    articles: Sequence[Article],
    date: str,
    domain: str,
    raw_response: Optional[str] = None,
) -> Brief:
    """Brief listing the first few articles verbatim, one per development."""
    if not articles:
        return empty_brief(date)

    developments: List[Development] = [
        {
            "development": article["title"],
            "key_takeaways": [],
            "sources": [reference_from_article(article)],
        }
        for article in articles[:MAX_FALLBACK_DEVELOPMENTS]
    ]
    return {
        "date": date,
        "executive_summary": (
            f"Analyzed {len(articles)} articles on {domain} today. "
            "See individual articles for details."
        ),
        "key_developments": developments,
        "sentiment_summary": FALLBACK_SENTIMENT,
        "trends": f"Multiple articles discussing {domain} across various sectors.",
        "what_to_watch": f"Monitor for emerging patterns in {domain}.",
        "article_count": len(articles),
        "is_fallback": True,
        "raw_ai_response": raw_response,
    }
