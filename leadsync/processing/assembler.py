"""Combine envelope metadata with mapped fields into a frozen lead."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from leadsync.core.models import Lead, RawMessage
from leadsync.processing.dedupe import make_dedupe_key
from leadsync.processing.mapper import map_fields


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def source_descriptor(message: RawMessage) -> str:
    return f"email:{message.sender} - {message.subject}"


def received_timestamp(message: RawMessage, now: Callable[[], datetime] = _utc_now) -> datetime:
    """Return the message timestamp in UTC, or ``now()`` when it has none.

    Naive timestamps are assumed to already be UTC.
    """

    stamp = message.received_at or now()
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp.astimezone(timezone.utc)


def assemble_lead(
    message: RawMessage,
    fields: Mapping[str, str],
    now: Optional[Callable[[], datetime]] = None,
) -> Lead:
    """Build the lead for one message from its extracted fields."""

    mapped = map_fields(fields)
    received_at = received_timestamp(message, now or _utc_now)
    return Lead(
        source=source_descriptor(message),
        raw=message.body,
        received_at=received_at,
        dedupe_key=make_dedupe_key(mapped["email"], mapped["number"], received_at),
        **mapped,
    )
