"""Core building blocks for the leadsync package."""
from leadsync.core.config import Settings, load_env_file, load_settings, require_setting
from leadsync.core.errors import ConfigError, LeadSyncError, MailboxError, PersistenceError
from leadsync.core.logging import configure_logging
from leadsync.core.models import FIELD_KEYS, FieldBag, Lead, RawMessage

__all__ = [
    "FIELD_KEYS",
    "ConfigError",
    "FieldBag",
    "Lead",
    "LeadSyncError",
    "MailboxError",
    "PersistenceError",
    "RawMessage",
    "Settings",
    "configure_logging",
    "load_env_file",
    "load_settings",
    "require_setting",
]
