"""Collect messages from saved ``.eml`` files or an open IMAP mailbox."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from leadsync.core.models import RawMessage
from leadsync.ingestion.emails import parse_message
from leadsync.ingestion.mailbox import ImapMailbox

logger = logging.getLogger(__name__)


def load_messages(data_dir: Path) -> Tuple[List[RawMessage], List[str]]:
    """Parse every ``*.eml`` under ``data_dir``; return messages and alerts."""

    messages: List[RawMessage] = []
    alerts: List[str] = []

    logger.info("Loading messages from %s", data_dir)

    for email_path in sorted(data_dir.glob("*.eml")):
        try:
            messages.append(parse_message(email_path.read_bytes(), source_name=email_path.name))
        except Exception:
            logger.exception("Failed to parse email %s", email_path)
            alerts.append(f"Failed to parse email {email_path.name}")

    logger.info("Loaded %d messages", len(messages))

    return messages, alerts


def read_mailbox(mailbox: ImapMailbox, mark_seen: bool = True) -> Tuple[List[RawMessage], List[str]]:
    """Fetch and parse every matching message from an open mailbox."""

    messages: List[RawMessage] = []
    alerts: List[str] = []

    for uid, raw in mailbox.fetch(mark_seen=mark_seen):
        try:
            messages.append(parse_message(raw, source_name=f"imap:{uid}"))
        except Exception:  # pragma: no cover - exercised via caplog
            logger.exception("Failed to parse IMAP message %s", uid)
            alerts.append(f"Failed to parse IMAP message {uid}")

    logger.info("Fetched %d messages", len(messages))

    return messages, alerts
