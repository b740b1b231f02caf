"""Plain-text field extraction for form notification emails."""
from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

from leadsync.core.models import FieldBag
from leadsync.extraction.patterns import REGISTRATION_PATTERN, TEXT_PATTERNS, classify_registration, resolve_field

logger = logging.getLogger(__name__)

_BULLETS = "-•*"


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _apply_recognizers(text: str) -> FieldBag:
    """Run every line-anchored recognizer once against the whole document."""

    bag = FieldBag()
    for key, pattern in TEXT_PATTERNS.items():
        match = pattern.search(text)
        if match:
            bag.fill(key, match.group(1))

    match = REGISTRATION_PATTERN.search(text)
    if match:
        value = match.group(1).strip()
        if value:
            bag.fill(classify_registration(value), value)
    return bag


def iter_label_lines(text: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(label, value)`` for every line shaped like ``label: value``."""

    for raw_line in _normalize_newlines(text).splitlines():
        if ":" not in raw_line:
            continue
        label, value = raw_line.split(":", 1)
        label = label.strip().lstrip(_BULLETS).strip()
        value = value.strip()
        if label and value:
            yield label, value


def _scan_label_lines(text: str) -> FieldBag:
    bag = FieldBag()
    for label, value in iter_label_lines(text):
        key = resolve_field(label, value)
        if key:
            bag.fill(key, value)
    return bag


def extract_from_text(text: Optional[str]) -> FieldBag:
    """Extract canonical fields from a plain-text body.

    The dedicated recognizers run first. Only when none of them matched do we
    fall back to resolving generic ``label: value`` lines through the synonym
    table, so a document in the expected layout is never second-guessed.
    """

    if not text:
        return FieldBag()

    normalized = _normalize_newlines(text)
    bag = _apply_recognizers(normalized)
    if bag:
        return bag

    logger.debug("No recognizer matched; scanning generic label lines")
    return _scan_label_lines(normalized)
