"""
Google Gemini backend.
"""

import logging

from google import genai

from alerts_brief.errors import ProviderError
from alerts_brief.providers.base import ModelBackend

logger = logging.getLogger(__name__)


class GeminiBackend(ModelBackend):
    """Calls the Gemini API through the google-genai client."""

    name = "gemini"
    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        self.model = model
        self.client = genai.Client(api_key=api_key)

    def invoke(self, prompt: str) -> str:
        logger.info("Asking %s for the brief...", self.model)
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config={"response_mime_type": "application/json"},
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            raise ProviderError(f"Gemini API error: {e}") from e

        response_text = response.text if response.text else ""
        if not response_text.strip():
            raise ProviderError(
                "Gemini returned an empty response", ProviderError.EMPTY_RESPONSE
            )
        return response_text
