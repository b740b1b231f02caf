"""Per-message processing and batch runs over a lead store."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from leadsync.core.models import Lead, RawMessage
from leadsync.extraction import extract_fields
from leadsync.processing.assembler import assemble_lead
from leadsync.processing.quality import is_acceptable
from leadsync.storage.gateway import LeadStore

logger = logging.getLogger(__name__)

SAVED = "saved"
DUPLICATE = "duplicate"
SKIPPED = "skipped"
FAILED = "failed"
EXTRACTED = "extracted"


@dataclass
class MessageOutcome:
    """What happened to one message."""

    status: str
    message: RawMessage
    lead: Optional[Lead] = None
    lead_id: Optional[int] = None
    error: Optional[str] = None


@dataclass
class BatchSummary:
    outcomes: List[MessageOutcome] = field(default_factory=list)
    alerts: List[str] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def leads(self) -> List[Lead]:
        return [outcome.lead for outcome in self.outcomes if outcome.lead is not None]

    def describe(self) -> str:
        parts = [f"{len(self.outcomes)} message(s)"]
        for status in (SAVED, DUPLICATE, EXTRACTED, SKIPPED, FAILED):
            total = self.count(status)
            if total:
                parts.append(f"{total} {status}")
        return ", ".join(parts)


def build_lead(message: RawMessage, now: Optional[Callable[[], datetime]] = None) -> Optional[Lead]:
    """Extract and assemble a lead; ``None`` when the message has no contact."""

    fields = extract_fields(message)
    logger.debug("Extracted from %s: %s", message.source_name or message.subject, dict(fields))
    lead = assemble_lead(message, fields, now=now)
    if not is_acceptable(lead):
        return None
    return lead


def process_message(
    message: RawMessage,
    store: Optional[LeadStore],
    now: Optional[Callable[[], datetime]] = None,
) -> MessageOutcome:
    """Turn one message into at most one saved lead.

    Without a store this is a dry run and accepted leads are only returned.
    Persistence errors propagate to the caller.
    """

    lead = build_lead(message, now=now)
    if lead is None:
        logger.warning("Skipped: no email/phone found (from %s, subject %r)", message.sender, message.subject)
        return MessageOutcome(SKIPPED, message)

    if store is None:
        return MessageOutcome(EXTRACTED, message, lead=lead)

    result = store.save(lead)
    if result.is_duplicate:
        return MessageOutcome(DUPLICATE, message, lead=lead)

    logger.info(
        "Saved lead id %s from %s %r (%s, %s)",
        result.lead_id,
        message.sender,
        message.subject,
        lead.email,
        lead.number,
    )
    return MessageOutcome(SAVED, message, lead=lead, lead_id=result.lead_id)


def run_batch(
    messages: Iterable[RawMessage],
    store: Optional[LeadStore],
    now: Optional[Callable[[], datetime]] = None,
) -> BatchSummary:
    """Process messages one by one; a failure never stops the rest."""

    summary = BatchSummary()
    for message in messages:
        try:
            outcome = process_message(message, store, now=now)
        except Exception as exc:
            logger.exception("Failed processing message from %s, subject %r", message.sender, message.subject)
            outcome = MessageOutcome(FAILED, message, error=str(exc))
            summary.alerts.append(f"Failed processing message from {message.sender}: {message.subject}")
        summary.outcomes.append(outcome)

    logger.info("Batch finished: %s", summary.describe())
    return summary
