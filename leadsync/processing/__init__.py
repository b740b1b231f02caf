"""Turn extracted fields into leads and push them to the store."""
from leadsync.processing.assembler import assemble_lead
from leadsync.processing.mapper import FIELD_COLUMNS, map_fields
from leadsync.processing.pipeline import BatchSummary, MessageOutcome, build_lead, process_message, run_batch
from leadsync.processing.quality import is_acceptable, validate_lead

__all__ = [
    "FIELD_COLUMNS",
    "BatchSummary",
    "MessageOutcome",
    "assemble_lead",
    "build_lead",
    "is_acceptable",
    "map_fields",
    "process_message",
    "run_batch",
    "validate_lead",
]
