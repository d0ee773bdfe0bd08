"""Unit tests for storage, scraping, mailbox and delivery services."""

import unittest
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from unittest.mock import MagicMock, patch

import requests

from alerts_brief.services.db import BriefStore
from alerts_brief.services.email_service import AlertInbox
from alerts_brief.services.fallback import fallback_brief
from alerts_brief.services.scraper import ArticleScraper
from alerts_brief.services.slack import SlackMessenger

ARTICLE_PAGE = """
<html><head><title>Fallback title</title><script>var x = 1;</script></head>
<body>
<nav>Home | About</nav>
<h1>Visa Launches Agent Toolkit</h1>
<article><p>{body}</p></article>
<footer>Copyright</footer>
</body></html>
"""

LINK = {"url": "https://News.example.com/visa", "title": "Alert title", "topic": "ai"}


def make_brief():
    return {
        "date": "2026-10-18",
        "executive_summary": "Agents are buying things.",
        "key_developments": [
            {
                "development": "Visa launches agent toolkit",
                "key_takeaways": ["Issuers first"],
                "sources": [
                    {"title": "Visa", "url": "https://x.com/a", "source": "x.com", "resolved": True},
                    {"title": "Blog", "url": "blog.example", "source": "", "resolved": False},
                ],
            }
        ],
        "sentiment_summary": "Optimistic",
        "trends": "Rails first.",
        "what_to_watch": "Liability.",
        "article_count": 2,
        "is_fallback": False,
        "raw_ai_response": "{}",
    }


class TestBriefStore(unittest.TestCase):
    def test_get_id(self):
        """Test deterministic hashing."""
        with patch("alerts_brief.services.db.firestore.Client"):
            store = BriefStore("test-project")
            url = "http://example.com/article"
            self.assertEqual(store.get_id(url), store.get_id(url))
            self.assertEqual(len(store.get_id(url)), 32)  # MD5 is 32 hex chars

    def test_disabled_without_project(self):
        store = BriefStore(None)
        self.assertFalse(store.enabled)
        self.assertEqual(store.filter_new([LINK]), [LINK])
        self.assertEqual(store.get_recent_briefs(), [])
        self.assertEqual(store.get_recent_articles(), [])
        store.save_brief(make_brief())

    @patch("alerts_brief.services.db.firestore.Client")
    def test_filter_new(self, mock_client):
        store = BriefStore("test-project")
        seen_id = store.get_id("https://a.com/1")
        seen = MagicMock(exists=True, id=seen_id)
        mock_client.return_value.get_all.return_value = [seen]

        links = [
            {"url": "https://a.com/1", "title": "one", "topic": "t"},
            {"url": "https://a.com/2", "title": "two", "topic": "t"},
            {"url": "https://a.com/2", "title": "two again", "topic": "t"},
        ]
        new = store.filter_new(links)

        self.assertEqual([l["url"] for l in new], ["https://a.com/2"])

    @patch("alerts_brief.services.db.firestore.Client")
    def test_save_brief_keyed_by_date(self, mock_client):
        store = BriefStore("test-project")
        store.save_brief(make_brief())

        store.briefs.document.assert_called_with("2026-10-18")
        record = store.briefs.document.return_value.set.call_args[0][0]
        self.assertEqual(record["executive_summary"], "Agents are buying things.")
        self.assertIn("created_date", record)

    @patch("alerts_brief.services.db.firestore.Client")
    def test_get_recent_briefs(self, mock_client):
        store = BriefStore("test-project")
        doc = MagicMock()
        doc.to_dict.return_value = make_brief()
        store.briefs.order_by.return_value.limit.return_value.stream.return_value = [doc]

        self.assertEqual(store.get_recent_briefs(7), [make_brief()])
        store.briefs.order_by.return_value.limit.assert_called_with(7)


class TestArticleScraper(unittest.TestCase):
    @patch("alerts_brief.services.scraper.requests.get")
    def test_scrape(self, mock_get):
        mock_get.return_value = MagicMock(text=ARTICLE_PAGE.format(body="Agents " * 40))

        article = ArticleScraper().scrape(LINK)

        self.assertEqual(article["title"], "Visa Launches Agent Toolkit")
        self.assertEqual(article["source"], "news.example.com")
        self.assertEqual(article["url"], LINK["url"])
        self.assertTrue(article["content"].startswith("Agents Agents"))
        self.assertNotIn("Copyright", article["content"])

    @patch("alerts_brief.services.scraper.requests.get")
    def test_nested_article_keeps_full_body(self, mock_get):
        page = (
            "<html><body><h1>Visa Launches Agent Toolkit</h1><article>"
            "<p>Lead paragraph about issuers and agents.</p>"
            "<article><p>Related: Mastercard teaser</p></article>"
            "<p>Closing paragraph " + "with more detail " * 10 + "ends here.</p>"
            "</article></body></html>"
        )
        mock_get.return_value = MagicMock(text=page)

        article = ArticleScraper().scrape(LINK)

        self.assertTrue(article["content"].startswith("Lead paragraph"))
        self.assertIn("Mastercard teaser", article["content"])
        self.assertTrue(article["content"].endswith("ends here."))

    @patch("alerts_brief.services.scraper.requests.get")
    def test_entry_content_selector(self, mock_get):
        page = (
            "<html><body><div class='sidebar'>Trending now</div>"
            "<div class='entry-content'><p>" + "Agents buy things. " * 10 + "</p></div>"
            "</body></html>"
        )
        mock_get.return_value = MagicMock(text=page)

        article = ArticleScraper().scrape(LINK)

        self.assertNotIn("Trending", article["content"])
        self.assertTrue(article["content"].startswith("Agents buy things."))

    @patch("alerts_brief.services.scraper.requests.get")
    def test_short_pages_rejected(self, mock_get):
        mock_get.return_value = MagicMock(text=ARTICLE_PAGE.format(body="Too short"))
        self.assertIsNone(ArticleScraper().scrape(LINK))

    @patch("alerts_brief.services.scraper.requests.get")
    def test_scrape_many_skips_failures(self, mock_get):
        ok = MagicMock(text=ARTICLE_PAGE.format(body="Agents " * 40))
        mock_get.side_effect = [ok, requests.Timeout("slow")]
        links = [LINK, {"url": "https://slow.example.com", "title": "Slow", "topic": "ai"}]

        articles = ArticleScraper(workers=1).scrape_many(links)

        self.assertEqual(len(articles), 1)


class TestAlertInbox(unittest.TestCase):
    @patch("alerts_brief.services.email_service.imaplib.IMAP4_SSL")
    def test_fetch_alerts(self, mock_imap):
        msg = MIMEMultipart("alternative")
        msg["Subject"] = "Google Alert - agentic commerce"
        msg.attach(MIMEText("plain", "plain"))
        msg.attach(MIMEText("<a href='https://a.com/x'>Story</a>", "html"))

        conn = mock_imap.return_value.__enter__.return_value
        conn.search.return_value = ("OK", [b"1 2 3"])
        conn.fetch.return_value = ("OK", [(b"1 (RFC822)", msg.as_bytes())])

        inbox = AlertInbox("imap.example.com", 993, "user", "pass", max_per_run=2)
        messages = inbox.fetch_alerts()

        self.assertEqual(len(messages), 2)
        self.assertEqual(messages[0][0], "Google Alert - agentic commerce")
        self.assertIn("https://a.com/x", messages[0][1])

    @patch("alerts_brief.services.email_service.imaplib.IMAP4_SSL")
    def test_connection_failure(self, mock_imap):
        mock_imap.side_effect = OSError("refused")
        inbox = AlertInbox("imap.example.com", 993, "user", "pass")
        self.assertEqual(inbox.fetch_alerts(), [])


class TestSlackMessenger(unittest.TestCase):
    def test_build_blocks(self):
        blocks = SlackMessenger("https://hooks.slack.test/x", "AI Brief").build_blocks(make_brief())

        self.assertEqual(blocks[0]["text"]["text"], "AI Brief - 2026-10-18")
        texts = "\n".join(b["text"]["text"] for b in blocks if b["type"] == "section")
        self.assertIn("<https://x.com/a|x.com>", texts)
        # Unresolved sources are listed without a link
        self.assertNotIn("<blog.example", texts)
        self.assertIn("Blog", texts)

    def test_build_blocks_without_developments(self):
        brief = fallback_brief([], "2026-10-18", "AI")
        blocks = SlackMessenger("https://hooks.slack.test/x").build_blocks(brief)
        texts = "\n".join(b["text"]["text"] for b in blocks if b["type"] == "section")
        self.assertNotIn("Key Developments", texts)

    @patch("alerts_brief.services.slack.requests.post")
    def test_send_brief(self, mock_post):
        ok = SlackMessenger("https://hooks.slack.test/x").send_brief(make_brief())

        self.assertTrue(ok)
        payload = mock_post.call_args.kwargs["json"]
        self.assertIn("blocks", payload)

    @patch("alerts_brief.services.slack.requests.post")
    def test_send_brief_failure(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("down")
        self.assertFalse(SlackMessenger("https://hooks.slack.test/x").send_brief(make_brief()))


if __name__ == "__main__":
    unittest.main()
