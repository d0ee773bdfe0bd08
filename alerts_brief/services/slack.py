"""
Slack delivery for the daily brief.

This module provides the SlackMessenger class which renders a brief as
Block Kit sections and posts it to an incoming webhook.
"""

import logging
from typing import Any, Dict, List

import requests

from alerts_brief.models import Brief, Development

logger = logging.getLogger(__name__)

# Slack rejects section text longer than 3000 characters
MAX_SECTION_CHARS = 3000


def _section(text: str) -> Dict[str, Any]:
    if len(text) > MAX_SECTION_CHARS:
        text = text[: MAX_SECTION_CHARS - 3] + "..."
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


class SlackMessenger:
    """Service for sending briefs to a Slack channel."""

    def __init__(self, webhook_url: str, title: str = "Intelligence Brief"):
        self.webhook_url = webhook_url
        self.title = title

    def _render_development(self, dev: Development) -> str:
        lines = [f"*{dev['development']}*"]
        lines.extend(f"• {takeaway}" for takeaway in dev["key_takeaways"])
        links = []
        for ref in dev["sources"]:
            label = ref.get("source") or ref.get("title") or "source"
            if ref.get("resolved", True) and ref.get("url"):
                links.append(f"<{ref['url']}|{label}>")
            else:
                links.append(label)
        if links:
            lines.append("_Sources:_ " + ", ".join(links))
        return "\n".join(lines)

    def build_blocks(self, brief: Brief) -> List[Dict[str, Any]]:
        """Renders the brief as Block Kit blocks."""
        blocks: List[Dict[str, Any]] = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": f"{self.title} - {brief['date']}"},
            },
            _section(f"*Executive Summary*\n{brief['executive_summary']}"),
            {"type": "divider"},
        ]

        if brief["key_developments"]:
            blocks.append(_section("*Key Developments*"))
            for dev in brief["key_developments"]:
                blocks.append(_section(self._render_development(dev)))
            blocks.append({"type": "divider"})

        blocks.append(_section(f"*Sentiment*\n{brief['sentiment_summary']}"))
        blocks.append(_section(f"*Trends*\n{brief['trends']}"))
        blocks.append(_section(f"*What to Watch*\n{brief['what_to_watch']}"))
        blocks.append(
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": f"Based on {brief['article_count']} article(s)",
                    }
                ],
            }
        )
        return blocks

    def send_brief(self, brief: Brief) -> bool:
        """Posts the brief to the webhook. Returns True on success."""
        payload = {
            "text": f"{self.title} - {brief['date']}",
            "blocks": self.build_blocks(brief),
        }
        try:
            resp = requests.post(self.webhook_url, json=payload, timeout=10)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to send to Slack: %s", e)
            return False
        logger.info("Brief sent to Slack.")
        return True
