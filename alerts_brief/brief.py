"""
Daily Intelligence Brief Generator
This script collects Google Alerts (email and RSS), scrapes the linked
articles, stores them in Firestore, asks the configured model for a daily
intelligence brief, and posts the brief to Slack.
"""

import datetime
import logging
import sys
from typing import List, Optional

from alerts_brief.config import Settings
from alerts_brief.errors import ConfigError
from alerts_brief.models import ArticleLink, Brief
from alerts_brief.parsers.email_alert import parse_alert_email
from alerts_brief.parsers.hackernews import HackerNewsFetcher
from alerts_brief.parsers.rss import AlertFeedParser
from alerts_brief.providers.base import ModelBackend
from alerts_brief.providers.factory import create_backend
from alerts_brief.services.analyzer import IntelligenceAnalyzer
from alerts_brief.services.db import BriefStore
from alerts_brief.services.email_service import AlertInbox
from alerts_brief.services.scraper import ArticleScraper
from alerts_brief.services.slack import SlackMessenger

logger = logging.getLogger(__name__)


def collect_links(settings: Settings, backend: ModelBackend) -> List[ArticleLink]:
    """Gathers candidate links from the mailbox, alert feeds and Hacker News."""
    links: List[ArticleLink] = []

    if settings.imap_host and settings.imap_user and settings.imap_password:
        inbox = AlertInbox(
            settings.imap_host,
            settings.imap_port,
            settings.imap_user,
            settings.imap_password,
            settings.max_emails_per_run,
        )
        for subject, body in inbox.fetch_alerts():
            found = parse_alert_email(body, subject)
            logger.info("Found %d links in '%s'", len(found), subject)
            links.extend(found)
    else:
        logger.info("IMAP settings not set. Skipping alert emails.")

    parser = AlertFeedParser()
    for topic, url in settings.feeds.items():
        found = parser.fetch(topic, url)
        logger.info("Found %d links in feed '%s'", len(found), topic)
        links.extend(found)

    if settings.hackernews:
        links.extend(HackerNewsFetcher(backend, settings.domain).fetch_relevant())

    # Same story often arrives through several alerts
    unique: List[ArticleLink] = []
    seen = set()
    for link in links:
        if link["url"] not in seen:
            seen.add(link["url"])
            unique.append(link)
    return unique


def run(settings: Settings, today: Optional[str] = None) -> Brief:
    """Runs one collection and synthesis cycle and returns the brief."""
    today = today or datetime.date.today().isoformat()
    logger.info("--- Starting Intelligence Run for %s ---", today)

    backend = create_backend(settings.ai_provider, settings.api_key(), settings.ai_model)
    analyzer = IntelligenceAnalyzer(backend, settings.domain, settings.context_limits)
    store = BriefStore(settings.gcp_project_id)

    new_links = store.filter_new(collect_links(settings, backend))
    scraped = ArticleScraper(workers=settings.scrape_workers).scrape_many(new_links)
    store.save_articles(scraped)

    todays_articles = store.get_recent_articles(days=1) if store.enabled else scraped
    logger.info("Found %d article(s) from today.", len(todays_articles))
    history = store.get_recent_briefs(settings.context_limits.history_days)
    logger.info("Found %d previous brief(s) for context.", len(history))

    brief = analyzer.synthesize(todays_articles, today, history)
    store.save_brief(brief)

    if brief["is_fallback"]:
        logger.info("Skipping Slack (fallback brief due to AI error).")
    elif settings.slack_webhook_url:
        SlackMessenger(settings.slack_webhook_url, settings.title).send_brief(brief)
    else:
        logger.warning("SLACK_WEBHOOK_URL not set. Brief not delivered.")

    return brief


def main():
    """Main execution entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        settings = Settings.from_env()
        run(settings)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
