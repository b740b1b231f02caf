"""Map extracted field bags onto lead storage columns."""
from __future__ import annotations

from typing import Any, Dict, Mapping

from leadsync.extraction.patterns import BOOLEAN_TOKENS, coerce_flag

# Canonical field key -> Lead attribute (and, with few exceptions, column name).
FIELD_COLUMNS: Dict[str, str] = {
    "name": "name",
    "email": "email",
    "number": "number",
    "make": "vehicle_brand",
    "model": "vehicle_model",
    "vrm": "vehicle_vrm",
    "vehicleTitle": "vehicle_title",
    "vehicleSeries": "vehicle_series",
    "year": "vehicle_reg",
    "fuelType": "fuel_type",
    "postcode": "postcode",
    "engineSize": "engin_capacity",
    "part": "vehicle_part",
    "partSupplied": "part_supplied",
    "supplyOnly": "supply_only",
    "usedCondition": "used_condition",
    "newCondition": "new_condition",
    "reconditionedCondition": "reconditioned_condition",
    "considerBoth": "consider_both",
    "considerAll": "consider_all_condition",
    "vehicleDrive": "vehicle_drive",
    "collectionRequired": "collection_required",
    "engineCode": "engine_code",
    "additionalNote": "description",
}


def map_fields(fields: Mapping[str, str]) -> Dict[str, Any]:
    """Rename canonical keys to lead attributes and coerce checkbox fields.

    Every attribute is present in the result; unset fields map to ``None``.
    """

    mapped: Dict[str, Any] = {}
    for key, column in FIELD_COLUMNS.items():
        value = fields.get(key) or None
        if key in BOOLEAN_TOKENS:
            mapped[column] = coerce_flag(key, value)
        else:
            mapped[column] = value

    if mapped["consider_both"] is None:
        mapped["consider_both"] = mapped["consider_all_condition"]

    # Some templates only send the series.
    if not mapped["vehicle_model"] and mapped["vehicle_series"]:
        mapped["vehicle_model"] = mapped["vehicle_series"]

    return mapped
