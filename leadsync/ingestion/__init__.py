"""Message ingestion from saved files and IMAP mailboxes."""
from leadsync.ingestion.emails import parse_message
from leadsync.ingestion.loader import load_messages, read_mailbox
from leadsync.ingestion.mailbox import ImapMailbox

__all__ = [
    "ImapMailbox",
    "load_messages",
    "parse_message",
    "read_mailbox",
]
