"""Data models shared by the extractors, the assembler and the lead store."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

FIELD_KEYS = (
    "name",
    "email",
    "number",
    "make",
    "model",
    "vrm",
    "year",
    "fuelType",
    "postcode",
    "engineSize",
    "vehicleTitle",
    "vehicleSeries",
    "part",
    "partSupplied",
    "supplyOnly",
    "usedCondition",
    "newCondition",
    "reconditionedCondition",
    "considerBoth",
    "considerAll",
    "vehicleDrive",
    "collectionRequired",
    "engineCode",
    "additionalNote",
)

CONTENT_HTML = "html"
CONTENT_TEXT = "text"


@dataclass(frozen=True)
class RawMessage:
    """An inbound document plus the envelope metadata it arrived with."""

    sender: str
    subject: str
    body: str
    content_type: str = CONTENT_TEXT
    received_at: Optional[datetime] = None
    source_name: str = ""

    @property
    def is_html(self) -> bool:
        return self.content_type == CONTENT_HTML


class FieldBag(dict):
    """Canonical field key to extracted value, filled first-writer-wins.

    A key that is missing from the bag is unset. Once a key holds a non-empty
    value, later ``fill`` calls for that key are ignored.
    """

    def fill(self, key: str, value: Optional[str]) -> bool:
        if key not in FIELD_KEYS:
            raise KeyError(f"Unknown field key: {key}")
        if self.get(key):
            return False
        cleaned = (value or "").strip()
        if not cleaned:
            return False
        self[key] = cleaned
        return True

    def merge(self, other: Mapping[str, str]) -> "FieldBag":
        for key, value in other.items():
            self.fill(key, value)
        return self


@dataclass(frozen=True)
class Lead:
    """The canonical record handed to the lead store."""

    source: str
    raw: str
    received_at: datetime
    dedupe_key: str
    name: Optional[str] = None
    email: Optional[str] = None
    number: Optional[str] = None
    vehicle_brand: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_vrm: Optional[str] = None
    vehicle_title: Optional[str] = None
    vehicle_series: Optional[str] = None
    vehicle_reg: Optional[str] = None
    fuel_type: Optional[str] = None
    postcode: Optional[str] = None
    engin_capacity: Optional[str] = None
    vehicle_part: Optional[str] = None
    part_supplied: Optional[bool] = None
    supply_only: Optional[bool] = None
    used_condition: Optional[bool] = None
    new_condition: Optional[bool] = None
    reconditioned_condition: Optional[bool] = None
    consider_both: Optional[bool] = None
    consider_all_condition: Optional[bool] = None
    vehicle_drive: Optional[str] = None
    collection_required: Optional[bool] = None
    engine_code: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary keyed by attribute name."""

        return asdict(self)
