"""Unit tests for response extraction."""

import json
import unittest

from alerts_brief.errors import ParseError, ShapeError
from alerts_brief.services.extractor import (
    extract_json,
    parse_brief_payload,
    strip_fences,
    validate_shape,
)

PAYLOAD = {
    "executive_summary": "Agents are buying things.",
    "key_developments": [
        {
            "development": "Visa launches agent toolkit",
            "key_takeaways": ["Available to issuers in Q1"],
            "sources": [{"title": "Visa", "url": "https://x.com/a", "source": "x.com"}],
        }
    ],
    "sentiment_summary": "Optimistic",
    "trends": "Payments networks move first.",
    "what_to_watch": "Merchant adoption.",
}


class TestExtractJson(unittest.TestCase):
    def test_fenced_json_with_prose(self):
        text = (
            "Sure! Here is the brief you asked for:\n\n```json\n"
            + json.dumps(PAYLOAD, indent=2)
            + "\n```\n\nLet me know if you need anything else."
        )
        self.assertEqual(json.loads(extract_json(text)), PAYLOAD)

    def test_plain_json(self):
        self.assertEqual(json.loads(extract_json(json.dumps(PAYLOAD))), PAYLOAD)

    def test_strip_fences(self):
        self.assertEqual(strip_fences('```json\n{"a": 1}\n```'), '{"a": 1}\n')
        self.assertEqual(strip_fences('```\n{"a": 1}```'), '{"a": 1}')

    def test_no_braces(self):
        with self.assertRaises(ParseError):
            extract_json("I could not produce a brief today.")

    def test_reversed_braces(self):
        with self.assertRaises(ParseError):
            extract_json("} nothing here {")


class TestParseBriefPayload(unittest.TestCase):
    def test_parses_object(self):
        text = "Here you go: " + json.dumps(PAYLOAD) + " Thanks."
        self.assertEqual(parse_brief_payload(text), PAYLOAD)

    def test_truncated_json(self):
        truncated = json.dumps(PAYLOAD)[:-40] + "}"
        with self.assertRaises(ParseError):
            parse_brief_payload(truncated)

    def test_empty_text(self):
        with self.assertRaises(ParseError):
            parse_brief_payload("")


class TestValidateShape(unittest.TestCase):
    def test_complete_payload(self):
        validate_shape(PAYLOAD)

    def test_missing_fields(self):
        payload = {k: v for k, v in PAYLOAD.items() if k not in ("trends", "what_to_watch")}
        with self.assertRaises(ShapeError) as ctx:
            validate_shape(payload)
        self.assertEqual(ctx.exception.missing, ["trends", "what_to_watch"])

    def test_developments_must_be_a_list(self):
        payload = dict(PAYLOAD, key_developments="none")
        with self.assertRaises(ShapeError):
            validate_shape(payload)


if __name__ == "__main__":
    unittest.main()
