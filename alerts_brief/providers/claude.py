"""
Anthropic Claude backend.
"""

import logging

import anthropic

from alerts_brief.errors import ProviderError
from alerts_brief.providers.base import ModelBackend

logger = logging.getLogger(__name__)


class ClaudeBackend(ModelBackend):
    """Calls a Claude model through the Messages API."""

    name = "claude"
    DEFAULT_MODEL = "claude-3-5-sonnet-20241022"

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, max_tokens: int = 2048):
        self.model = model
        self.max_tokens = max_tokens
        self.client = anthropic.Anthropic(api_key=api_key)

    def invoke(self, prompt: str) -> str:
        logger.info("Asking %s for the brief...", self.model)
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AuthenticationError as e:
            raise ProviderError(f"Claude authentication failed: {e}", ProviderError.AUTH) from e
        except Exception as e:  # pylint: disable=broad-exception-caught
            raise ProviderError(f"Claude API error: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise ProviderError(
                "Expected text response from Claude", ProviderError.EMPTY_RESPONSE
            )
        return text
