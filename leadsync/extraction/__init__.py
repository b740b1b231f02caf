"""Field extraction from form notification bodies."""
from leadsync.core.models import FieldBag, RawMessage
from leadsync.extraction.markup import DEFAULT_HEURISTICS, Heuristic, extract_from_html
from leadsync.extraction.patterns import coerce_flag, lookup_label, normalize_label, resolve_field
from leadsync.extraction.text import extract_from_text


def extract_fields(message: RawMessage) -> FieldBag:
    """Pick the extractor matching the message's content type."""

    if message.is_html:
        return extract_from_html(message.body)
    return extract_from_text(message.body)


__all__ = [
    "DEFAULT_HEURISTICS",
    "Heuristic",
    "coerce_flag",
    "extract_fields",
    "extract_from_html",
    "extract_from_text",
    "lookup_label",
    "normalize_label",
    "resolve_field",
]
