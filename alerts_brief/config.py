"""
Runtime configuration.

Non-secret settings live in an optional config.json next to the package;
credentials and the provider selection come from environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from alerts_brief.errors import ConfigError
from alerts_brief.providers.factory import API_KEY_ENV, BACKENDS
from alerts_brief.services.context import ContextLimits

logger = logging.getLogger(__name__)


def load_config(config_filename: str = "config.json") -> Dict[str, Any]:
    """Loads configuration from a JSON file."""
    # Build absolute path relative to this module
    base_dir = os.path.dirname(os.path.abspath(__file__))
    config_path = os.path.join(base_dir, config_filename)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Using empty config.", config_path)
        return {"feeds": {}}


@dataclass
class Settings:
    """Everything a run needs, resolved from config.json and the environment."""

    ai_provider: str = "gemini"
    ai_model: Optional[str] = None
    api_keys: Dict[str, Optional[str]] = field(default_factory=dict)
    gcp_project_id: Optional[str] = None
    slack_webhook_url: Optional[str] = None
    imap_host: Optional[str] = None
    imap_port: int = 993
    imap_user: Optional[str] = None
    imap_password: Optional[str] = None
    max_emails_per_run: int = 2
    feeds: Dict[str, str] = field(default_factory=dict)
    domain: str = "your monitored topics"
    title: str = "Intelligence Brief"
    context_limits: ContextLimits = field(default_factory=ContextLimits)
    scrape_workers: int = 3
    hackernews: bool = True

    @classmethod
    def from_env(cls, config: Optional[Dict[str, Any]] = None) -> "Settings":
        """Merges config.json values with environment variables."""
        config = config if config is not None else load_config()
        brief = config.get("brief", {})

        provider = os.environ.get("AI_PROVIDER", "gemini").strip().lower()
        if provider not in BACKENDS:
            raise ConfigError(
                f"Invalid AI_PROVIDER: {provider}. Must be one of {', '.join(BACKENDS)}"
            )

        return cls(
            ai_provider=provider,
            ai_model=os.environ.get("AI_MODEL") or None,
            api_keys={
                "gemini": os.environ.get(API_KEY_ENV["gemini"])
                or os.environ.get("GEMINI_API_KEY"),
                "openai": os.environ.get(API_KEY_ENV["openai"]),
                "claude": os.environ.get(API_KEY_ENV["claude"]),
            },
            gcp_project_id=os.environ.get("GCP_PROJECT_ID"),
            slack_webhook_url=os.environ.get("SLACK_WEBHOOK_URL"),
            imap_host=os.environ.get("IMAP_HOST"),
            imap_port=_int_env("IMAP_PORT", 993),
            imap_user=os.environ.get("IMAP_USER"),
            imap_password=os.environ.get("IMAP_PASSWORD"),
            max_emails_per_run=_int_env("MAX_EMAILS_PER_RUN", 2),
            feeds=dict(config.get("feeds", {})),
            domain=os.environ.get("BRIEF_DOMAIN") or brief.get("domain", cls.domain),
            title=os.environ.get("BRIEF_TITLE") or brief.get("title", cls.title),
            context_limits=ContextLimits.from_config(config.get("context", {})),
            scrape_workers=_int_value("scrape_workers", config.get("scrape_workers", 3)),
            hackernews=bool(config.get("hackernews", True)),
        )

    def api_key(self) -> Optional[str]:
        """API key for the selected provider."""
        return self.api_keys.get(self.ai_provider)


def _int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer if set") from None


def _int_value(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer") from None
