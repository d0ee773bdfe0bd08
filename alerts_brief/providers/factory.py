"""
Configuration-driven selection of the model backend.
"""

from typing import Callable, Dict, Optional

from alerts_brief.errors import ConfigError
from alerts_brief.providers.base import ModelBackend
from alerts_brief.providers.claude import ClaudeBackend
from alerts_brief.providers.gemini import GeminiBackend
from alerts_brief.providers.openai_backend import OpenAIBackend

BACKENDS: Dict[str, Callable[..., ModelBackend]] = {
    "gemini": GeminiBackend,
    "openai": OpenAIBackend,
    "claude": ClaudeBackend,
}

API_KEY_ENV = {
    "gemini": "GEMINI_KEY",
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}


def create_backend(
    provider: str, api_key: Optional[str], model: Optional[str] = None
) -> ModelBackend:
    """Builds the backend named by `provider`."""
    provider = (provider or "").strip().lower()
    if provider not in BACKENDS:
        raise ConfigError(
            f"Unknown AI provider: {provider!r}. Must be one of {', '.join(BACKENDS)}"
        )
    if not api_key:
        raise ConfigError(f"{API_KEY_ENV[provider]} is required for the {provider} provider")

    backend_cls = BACKENDS[provider]
    if model:
        return backend_cls(api_key, model=model)
    return backend_cls(api_key)
