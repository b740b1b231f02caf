"""Export destinations for extracted leads."""
from leadsync.reporting.sinks import ensure_output_dir, write_csv, write_excel
from leadsync.reporting.templates import LEAD_HEADERS, lead_to_row, leads_to_rows

__all__ = [
    "LEAD_HEADERS",
    "ensure_output_dir",
    "lead_to_row",
    "leads_to_rows",
    "write_csv",
    "write_excel",
]
