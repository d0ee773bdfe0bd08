"""
Error types raised while synthesizing a brief.

Everything except ConfigError is recovered inside the analyzer; the worst
outcome of a failed run is a fallback brief.
"""

from dataclasses import dataclass
from typing import List, Optional


class BriefError(Exception):
    """Base class for brief synthesis failures."""


class ProviderError(BriefError):
    """The model backend failed or returned nothing usable."""

    TRANSPORT = "transport"
    AUTH = "auth"
    EMPTY_RESPONSE = "empty_response"

    def __init__(self, message: str, reason: str = TRANSPORT):
        super().__init__(message)
        self.reason = reason


class ParseError(BriefError):
    """No JSON object could be recovered from the model's text."""


class ShapeError(BriefError):
    """The JSON parsed but is missing required top-level fields."""

    def __init__(self, missing: List[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing


class ConfigError(Exception):
    """Invalid or incomplete runtime configuration."""


@dataclass(frozen=True)
class ReconciliationGap:
    """A source reference that could not be matched to an input article."""

    development: str
    title: str
    url: Optional[str]

    def __str__(self) -> str:
        return (
            f"Unresolved source '{self.title}' ({self.url or 'no url'}) "
            f"in '{self.development}'"
        )
