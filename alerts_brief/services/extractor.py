"""
Recovers the brief's JSON payload from free-form model output.

Models wrap JSON in markdown fences or add commentary around it, so the text
is cleaned up before it reaches the strict JSON parser.
"""

import json
import re
from typing import Any, Dict

from alerts_brief.errors import ParseError, ShapeError

REQUIRED_FIELDS = (
    "executive_summary",
    "key_developments",
    "sentiment_summary",
    "trends",
    "what_to_watch",
)

_FENCE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?")


def strip_fences(text: str) -> str:
    """Removes markdown code fence delimiters (```json, ```)."""
    return _FENCE.sub("", text.strip())


def extract_json(text: str) -> str:
    """Returns the substring from the first '{' to the last '}' inclusive."""
    cleaned = strip_fences(text or "")
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ParseError("No JSON object found in model response")
    return cleaned[start : end + 1]


def parse_brief_payload(text: str) -> Dict[str, Any]:
    """Extracts and parses the JSON object in the model's response."""
    candidate = extract_json(text)
    try:
        payload = json.loads(candidate)
    except (json.JSONDecodeError, ValueError) as e:
        raise ParseError(f"Failed to parse model response: {e}") from e
    if not isinstance(payload, dict):
        raise ParseError("Model response is not a JSON object")
    return payload


def validate_shape(payload: Dict[str, Any]) -> None:
    """Raises ShapeError if required top-level fields are missing."""
    missing = [field for field in REQUIRED_FIELDS if field not in payload]
    if missing:
        raise ShapeError(missing)
    if not isinstance(payload["key_developments"], list):
        raise ShapeError(["key_developments"])
