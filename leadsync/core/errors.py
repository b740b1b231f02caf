"""Exception types raised by leadsync collaborators."""


class LeadSyncError(Exception):
    """Base class for errors surfaced by the leadsync package."""


class ConfigError(LeadSyncError, ValueError):
    """A required setting is missing or cannot be interpreted."""


class PersistenceError(LeadSyncError):
    """The lead store rejected or failed to execute an insert."""


class MailboxError(LeadSyncError):
    """The IMAP server answered a command with a non-OK status."""
