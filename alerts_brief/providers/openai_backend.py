"""
OpenAI chat completions backend.
"""

import logging

from openai import AuthenticationError, OpenAI

from alerts_brief.errors import ProviderError
from alerts_brief.providers.base import ModelBackend

logger = logging.getLogger(__name__)


class OpenAIBackend(ModelBackend):
    """Calls an OpenAI chat model in JSON mode."""

    name = "openai"
    DEFAULT_MODEL = "gpt-4o"

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, temperature: float = 0.7):
        self.model = model
        self.temperature = temperature
        self.client = OpenAI(api_key=api_key)

    def invoke(self, prompt: str) -> str:
        logger.info("Asking %s for the brief...", self.model)
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=self.temperature,
            )
        except AuthenticationError as e:
            raise ProviderError(f"OpenAI authentication failed: {e}", ProviderError.AUTH) from e
        except Exception as e:  # pylint: disable=broad-exception-caught
            raise ProviderError(f"OpenAI API error: {e}") from e

        content = resp.choices[0].message.content if resp.choices else None
        if not content or not content.strip():
            raise ProviderError(
                "No content in OpenAI response", ProviderError.EMPTY_RESPONSE
            )
        return content
