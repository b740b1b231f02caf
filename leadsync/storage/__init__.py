"""Lead persistence."""
from leadsync.storage.gateway import DUPLICATE, SAVED, LeadStore, SaveResult, normalize_database_url
from leadsync.storage.schema import leads_table, metadata

__all__ = [
    "DUPLICATE",
    "SAVED",
    "LeadStore",
    "SaveResult",
    "leads_table",
    "metadata",
    "normalize_database_url",
]
