"""Extract structured leads from quote-request notification emails."""
from leadsync.core import FIELD_KEYS, FieldBag, Lead, RawMessage, Settings, configure_logging, load_settings
from leadsync.extraction import extract_fields, extract_from_html, extract_from_text
from leadsync.ingestion import ImapMailbox, load_messages, parse_message, read_mailbox
from leadsync.processing import assemble_lead, build_lead, map_fields, process_message, run_batch
from leadsync.storage import LeadStore

__all__ = [
    "FIELD_KEYS",
    "FieldBag",
    "ImapMailbox",
    "Lead",
    "LeadStore",
    "RawMessage",
    "Settings",
    "assemble_lead",
    "build_lead",
    "configure_logging",
    "extract_fields",
    "extract_from_html",
    "extract_from_text",
    "load_messages",
    "load_settings",
    "map_fields",
    "parse_message",
    "process_message",
    "read_mailbox",
    "run_batch",
]
