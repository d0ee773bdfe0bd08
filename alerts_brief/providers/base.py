"""
Base interface for model backends.

This module defines the contract that every model backend must follow.
"""

from typing import Protocol


class ModelBackend(Protocol):
    """
    Protocol for model backends.

    Classes implementing this protocol send a single prompt to one model and
    return its raw text, raising ProviderError on any failure.
    """

    name: str
    model: str

    def invoke(self, prompt: str) -> str:
        """Sends the prompt and returns the raw response text."""
