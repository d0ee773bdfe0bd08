"""
Prompt composition for the daily intelligence brief.
"""

from typing import Sequence

from alerts_brief.models import Article

MAX_CONTENT_CHARS = 1500
TOTAL_CONTENT_CHARS = 8000

_BRIEF_PROMPT = """
You are an intelligence analyst covering {domain}. Analyze today's articles and create a daily intelligence brief.

{context}Articles ({count} total):
{articles}

Rules:
1. Consolidate: when several articles cover the same story, report it as ONE development and list every article as a source. Never repeat a story across developments.
2. Key takeaways must add information that is not already in the development headline. Do not restate the headline.
3. Every source "url" must be the complete absolute URL of the article exactly as given above (starting with https:// or http://). Never give a bare domain.
4. Report 3-5 developments.
{history_rule}

Respond with a JSON object using exactly this schema:
{{
  "executive_summary": "2-3 sentence summary of what's happening today",
  "key_developments": [
    {{
      "development": "short headline of the story",
      "key_takeaways": ["non-redundant takeaway", "another takeaway"],
      "sources": [
        {{"title": "article title", "url": "full article url", "source": "source domain"}}
      ]
    }}
  ],
  "sentiment_summary": "Overall mood: optimistic/cautious/neutral/hype - with brief reasoning",
  "trends": "What patterns do you see? 2-3 sentences.",
  "what_to_watch": "What questions are emerging? What might happen next? 2-3 sentences."
}}

Focus on intelligence, not just summaries. What actually matters? What's changing?

RESPOND WITH ONLY THE RAW JSON OBJECT. NO MARKDOWN CODE BLOCKS. NO EXPLANATIONS.
"""

_HISTORY_RULE = (
    "5. Skip developments already listed in the historical context unless there "
    "is a material update, and say what changed."
)


def content_budget(article_count: int) -> int:
    """Per-article content budget that keeps the prompt roughly bounded."""
    if article_count <= 0:
        return MAX_CONTENT_CHARS
    return min(MAX_CONTENT_CHARS, TOTAL_CONTENT_CHARS // article_count)


def _render_article(index: int, article: Article, budget: int) -> str:
    content = " ".join((article.get("content") or "").split())
    # Marker counts against the budget
    if len(content) > budget:
        content = content[: max(budget - 3, 0)].rstrip() + "..."
    return (
        f"[{index}] {article['title']}\n"
        f"URL: {article['url']}\n"
        f"Source: {article['source']}\n"
        f"Topic: {article.get('topic', '')}\n"
        f"Content: {content}\n"
    )


def compose_prompt(articles: Sequence[Article], domain: str, context: str = "") -> str:
    """Renders the articles, domain and history block into one instruction."""
    if not articles:
        raise ValueError("compose_prompt requires at least one article")

    budget = content_budget(len(articles))
    rendered = "\n".join(
        _render_article(i, a, budget) for i, a in enumerate(articles, start=1)
    )
    # Only mention history when there is some, so the model never looks for it.
    context_block = f"{context.strip()}\n\n" if context.strip() else ""
    history_rule = _HISTORY_RULE if context_block else ""

    return _BRIEF_PROMPT.format(
        domain=domain,
        context=context_block,
        history_rule=history_rule,
        count=len(articles),
        articles=rendered,
    )
