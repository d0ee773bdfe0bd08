"""Unit tests for the historical context builder."""

import unittest

from alerts_brief.errors import ConfigError
from alerts_brief.services.context import ContextLimits, build_context


def make_brief(day: int, developments: int = 3):
    return {
        "date": f"2026-10-{day:02d}",
        "executive_summary": f"Summary {day}",
        "key_developments": [
            {
                "development": f"Headline {day}-{i}",
                "key_takeaways": [],
                "sources": [],
            }
            for i in range(developments)
        ],
        "sentiment_summary": f"Cautious on day {day}. " + "x" * 200,
        "trends": f"Trend {day}",
        "what_to_watch": f"Watch {day}",
        "article_count": 4,
        "is_fallback": False,
        "raw_ai_response": None,
    }


class TestBuildContext(unittest.TestCase):
    def test_empty_history_gives_empty_string(self):
        self.assertEqual(build_context([]), "")

    def test_headlines_are_capped(self):
        history = [make_brief(day) for day in range(17, 7, -1)]
        context = build_context(history)

        self.assertLessEqual(context.count("Headline "), 15)
        # Only the five newest briefs contribute headlines
        self.assertIn("Headline 17-0", context)
        self.assertNotIn("Headline 12-0", context)

    def test_watch_and_sentiment_limited_to_three_briefs(self):
        history = [make_brief(day) for day in range(17, 7, -1)]
        context = build_context(history)

        self.assertIn("Watch 15", context)
        self.assertNotIn("Watch 14", context)
        self.assertIn("Cautious on day 15", context)
        self.assertNotIn("Cautious on day 14", context)

    def test_sentiment_is_truncated(self):
        context = build_context([make_brief(17)])
        sentiment_line = [
            line for line in context.splitlines() if "Cautious on day 17" in line
        ][0]
        text = sentiment_line.split("] ", 1)[1]
        self.assertEqual(len(text), 100)

    def test_legacy_string_developments(self):
        brief = make_brief(17)
        brief["key_developments"] = ["Old style headline"]
        context = build_context([brief])
        self.assertIn("Old style headline", context)

    def test_limits_are_configurable(self):
        limits = ContextLimits.from_config({"max_headlines": "2", "unknown": 5})
        self.assertEqual(limits.max_headlines, 2)

        context = build_context([make_brief(17)], limits)
        self.assertEqual(context.count("Headline "), 2)

    def test_non_integer_limit_rejected(self):
        with self.assertRaises(ConfigError):
            ContextLimits.from_config({"max_headlines": "many"})
        with self.assertRaises(ConfigError):
            ContextLimits.from_config({"history_days": None})

    def test_briefs_without_content_give_empty_string(self):
        brief = make_brief(17, developments=0)
        brief["what_to_watch"] = ""
        brief["sentiment_summary"] = ""
        self.assertEqual(build_context([brief]), "")


if __name__ == "__main__":
    unittest.main()
