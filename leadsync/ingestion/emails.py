"""Parse raw RFC 822 messages into ``RawMessage`` envelopes."""
from __future__ import annotations

import logging
from datetime import datetime
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from email.utils import parsedate_to_datetime
from typing import Optional, Tuple

from leadsync.core.models import CONTENT_HTML, CONTENT_TEXT, RawMessage

logger = logging.getLogger(__name__)


def _parse_email_date(date_header: str | None) -> Optional[datetime]:
    """Return the datetime carried by a Date header, or None when unusable."""

    if not date_header:
        return None

    try:
        parsed = parsedate_to_datetime(str(date_header))
    except (TypeError, ValueError):
        logger.debug("Unparseable Date header %r", date_header)
        return None

    return parsed or None


def _decode_part(part: EmailMessage) -> str:
    try:
        return part.get_content()
    except (KeyError, LookupError):
        # Unknown charset or transfer encoding; fall back to a lenient decode.
        payload = part.get_payload(decode=True) or b""
        charset = part.get_content_charset() or "utf-8"
        try:
            return payload.decode(charset, errors="replace")
        except LookupError:
            return payload.decode("utf-8", errors="replace")


def _extract_body(message: EmailMessage) -> Tuple[str, str]:
    """Return ``(content_type, body)`` preferring HTML over plain text."""

    if message.is_multipart():
        part = message.get_body(preferencelist=("html", "plain"))
        if part is None:
            return CONTENT_TEXT, ""
        content = _decode_part(part)
        if part.get_content_subtype() == "html":
            return CONTENT_HTML, content
        return CONTENT_TEXT, content.replace("\r\n", "\n").replace("\r", "\n")

    if message.get_content_maintype() == "text":
        content = _decode_part(message)
        if message.get_content_subtype() == "html":
            return CONTENT_HTML, content
        return CONTENT_TEXT, content.replace("\r\n", "\n").replace("\r", "\n")

    return CONTENT_TEXT, ""


def parse_message(raw: bytes, source_name: str = "") -> RawMessage:
    """Build a ``RawMessage`` from the bytes of one email."""

    message = BytesParser(policy=policy.default).parsebytes(raw)

    content_type, body = _extract_body(message)
    return RawMessage(
        sender=str(message["From"] or ""),
        subject=str(message["Subject"] or ""),
        body=body,
        content_type=content_type,
        received_at=_parse_email_date(message["Date"]),
        source_name=source_name,
    )
