"""
Mailbox service for collecting Google Alerts emails.

This module provides the AlertInbox class which handles:
- Connecting to the mailbox over IMAP
- Finding unread alert messages
- Extracting the subject and HTML body of each message
"""

import email
import imaplib
import logging
from email.header import decode_header, make_header
from email.message import Message
from typing import List, Tuple

logger = logging.getLogger(__name__)

ALERTS_SENDER = "googlealerts-noreply@google.com"


class AlertInbox:
    """Service for reading alert emails from an IMAP mailbox."""

    def __init__(self, host: str, port: int, user: str, password: str, max_per_run: int = 2):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.max_per_run = max_per_run

    @staticmethod
    def _decode_subject(msg: Message) -> str:
        return str(make_header(decode_header(msg.get("Subject", ""))))

    @staticmethod
    def _html_body(msg: Message) -> str:
        """Returns the first text/html part of the message."""
        for part in msg.walk():
            if part.get_content_type() != "text/html":
                continue
            payload = part.get_payload(decode=True)
            if payload is None:
                continue
            charset = part.get_content_charset() or "utf-8"
            return payload.decode(charset, errors="replace")
        return ""

    def fetch_alerts(self) -> List[Tuple[str, str]]:
        """Returns (subject, html) for unread alert emails, marking them seen."""
        messages: List[Tuple[str, str]] = []
        try:
            with imaplib.IMAP4_SSL(self.host, self.port) as conn:
                conn.login(self.user, self.password)
                conn.select("INBOX")
                status, data = conn.search(None, "UNSEEN", "FROM", f'"{ALERTS_SENDER}"')
                if status != "OK" or not data or not data[0]:
                    logger.info("No new Google Alerts emails found.")
                    return []

                ids = data[0].split()[: self.max_per_run]
                for msg_id in ids:
                    status, parts = conn.fetch(msg_id, "(RFC822)")
                    if status != "OK" or not parts or not isinstance(parts[0], tuple):
                        logger.warning("Could not fetch message %s", msg_id)
                        continue
                    msg = email.message_from_bytes(parts[0][1])
                    messages.append((self._decode_subject(msg), self._html_body(msg)))
        except (imaplib.IMAP4.error, OSError) as e:
            logger.error("Mailbox fetch failed: %s", e)
            return []

        logger.info("Found %d new alert email(s).", len(messages))
        return messages
