"""Mapping utilities to lay leads out as spreadsheet rows."""
from __future__ import annotations

from datetime import timezone
from typing import Any, Dict, Iterable, List, Optional

from leadsync.core.models import Lead

LEAD_HEADERS = [
    "Received",
    "Source",
    "Name",
    "Email",
    "Phone",
    "Postcode",
    "Make",
    "Model",
    "Series",
    "Title",
    "VRM",
    "Year",
    "Fuel_Type",
    "Engine_Size",
    "Engine_Code",
    "Drive",
    "Part",
    "Part_Supplied",
    "Supply_Only",
    "Used",
    "New",
    "Reconditioned",
    "Consider_Both",
    "Consider_All",
    "Collection_Required",
    "Note",
]


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.split())


def _format_flag(value: Optional[bool]) -> str:
    if value is None:
        return ""
    return "yes" if value else "no"


def lead_to_row(lead: Lead) -> Dict[str, Any]:
    """Convert a Lead into the spreadsheet dictionary."""

    row = {
        "Received": lead.received_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
        "Source": _clean_text(lead.source),
        "Name": _clean_text(lead.name),
        "Email": lead.email or "",
        "Phone": lead.number or "",
        "Postcode": _clean_text(lead.postcode).upper(),
        "Make": _clean_text(lead.vehicle_brand),
        "Model": _clean_text(lead.vehicle_model),
        "Series": _clean_text(lead.vehicle_series),
        "Title": _clean_text(lead.vehicle_title),
        "VRM": _clean_text(lead.vehicle_vrm).upper(),
        "Year": lead.vehicle_reg or "",
        "Fuel_Type": _clean_text(lead.fuel_type),
        "Engine_Size": _clean_text(lead.engin_capacity),
        "Engine_Code": _clean_text(lead.engine_code),
        "Drive": _clean_text(lead.vehicle_drive),
        "Part": _clean_text(lead.vehicle_part),
        "Part_Supplied": _format_flag(lead.part_supplied),
        "Supply_Only": _format_flag(lead.supply_only),
        "Used": _format_flag(lead.used_condition),
        "New": _format_flag(lead.new_condition),
        "Reconditioned": _format_flag(lead.reconditioned_condition),
        "Consider_Both": _format_flag(lead.consider_both),
        "Consider_All": _format_flag(lead.consider_all_condition),
        "Collection_Required": _format_flag(lead.collection_required),
        "Note": _clean_text(lead.description),
    }
    return row


def leads_to_rows(leads: Iterable[Lead]) -> List[Dict[str, Any]]:
    """Convert an iterable of Lead objects into header-aligned rows."""

    return [lead_to_row(lead) for lead in leads]
