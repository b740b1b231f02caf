"""Field recognizers and label synonyms shared by the text and markup extractors.

Everything in this module is a read-only lookup table or a pure function over
one. The text extractor applies ``TEXT_PATTERNS`` line by line; both
extractors resolve free-form labels through ``resolve_field`` so that the
registration/year rule is applied the same way on every path.
"""
from __future__ import annotations

import re
from typing import Dict, FrozenSet, Optional, Pattern, Tuple

REGISTRATION = "registration"

_FLAGS = re.IGNORECASE | re.MULTILINE
_REST_OF_LINE = r"[ \t]*(.*?)[ \t]*$"
_FLAG_TOKEN = r"[ \t]*(on|yes|no|off|true|false)\b"
_YEAR_RE = re.compile(r"(?:19|20)\d{2}")


def _line(labels: str, value: str = _REST_OF_LINE, flags: int = _FLAGS) -> Pattern[str]:
    """Compile a recognizer for ``Label: value`` at the start of a line."""

    return re.compile(rf"^[ \t]*(?:{labels})[ \t]*:{value}", flags)


TEXT_PATTERNS: Dict[str, Pattern[str]] = {
    "name": _line(r"(?:Customer[ \t]+|Full[ \t]+)?Name"),
    "email": _line(
        r"E-?mail(?:[ \t]+Address)?",
        r"[ \t]*([\w.%+-]+@[\w.-]+\.[A-Za-z]{2,})",
    ),
    "number": _line(
        r"Phone(?:[ \t]+Number)?|Telephone|Contact[ \t]+Number",
        r"[ \t]*([+\d(][\d \t().-]*)",
    ),
    "make": _line(r"Make|(?:Vehicle|Engine)[ \t]+Brand|Brand"),
    "model": _line(r"(?:Vehicle[ \t]+)?Model"),
    "vrm": _line(r"(?:Vehicle[ \t]+)?VRM"),
    "year": _line(r"(?:Vehicle[ \t]+)?Year", r"[ \t]*((?:19|20)\d{2})\b"),
    "fuelType": _line(r"Fuel(?:[ \t]*Type)?"),
    "postcode": _line(
        r"Post[ \t]*code|Zip[ \t]*Code",
        r"[ \t]*([A-Za-z0-9][A-Za-z0-9 \t-]*)",
    ),
    "engineSize": _line(
        r"Engine[ \t]*(?:Size|Capacity)",
        r"[ \t]*(\d[\d.]*(?:[ \t]*L\b)?)",
    ),
    "vehicleTitle": _line(r"(?:Engine|Vehicle)[ \t]+Title"),
    "vehicleSeries": _line(r"(?:Vehicle[ \t]+)?Series"),
    "additionalNote": _line(
        r"Additional[ \t]+Note|Extra[ \t]+Note|Description|Note",
        r"[ \t]*(.*?)(?=^[ \t]*[A-Za-z][\w \t]{0,40}:|^[ \t]*$|\Z)",
        _FLAGS | re.DOTALL,
    ),
    "part": _line(r"(?:Vehicle[ \t]*)?Part"),
    "partSupplied": _line(r"Part[ \t]*Supplied", _FLAG_TOKEN),
    "supplyOnly": _line(r"Supply[ \t]*Only", _FLAG_TOKEN),
    "usedCondition": _line(r"Used[ \t]*Condition", _FLAG_TOKEN),
    "newCondition": _line(r"New[ \t]*Condition", _FLAG_TOKEN),
    "reconditionedCondition": _line(r"Reconditioned[ \t]*Condition", _FLAG_TOKEN),
    "considerBoth": _line(r"Consider[ \t]*Both(?:[ \t]*Conditions?)?", _FLAG_TOKEN),
    "considerAll": _line(r"Consider[ \t]*All(?:[ \t]*Conditions?)?", _FLAG_TOKEN),
    "vehicleDrive": _line(r"(?:Vehicle[ \t]*)?Drive"),
    "collectionRequired": _line(r"Collection(?:[ \t]*Required)?", _FLAG_TOKEN),
    "engineCode": _line(r"Engine[ \t]*Code"),
}

# Resolved by classify_registration once the value is known.
REGISTRATION_PATTERN: Pattern[str] = _line(r"(?:Vehicle[ \t]+)?Registration|Reg")

LABEL_SYNONYMS: Dict[str, str] = {
    "name": "name",
    "customer name": "name",
    "full name": "name",
    "email": "email",
    "e-mail": "email",
    "email address": "email",
    "phone": "number",
    "phone number": "number",
    "telephone": "number",
    "contact number": "number",
    "make": "make",
    "brand": "make",
    "vehicle brand": "make",
    "engine brand": "make",
    "model": "model",
    "vehicle model": "model",
    "vrm": "vrm",
    "vehicle vrm": "vrm",
    "vehicle registration": REGISTRATION,
    "registration": REGISTRATION,
    "reg": REGISTRATION,
    "year": "year",
    "vehicle year": "year",
    "fuel type": "fuelType",
    "fuel": "fuelType",
    "postcode": "postcode",
    "post code": "postcode",
    "zip code": "postcode",
    "engine size": "engineSize",
    "engine capacity": "engineSize",
    "engine title": "vehicleTitle",
    "vehicle title": "vehicleTitle",
    "vehicle series": "vehicleSeries",
    "series": "vehicleSeries",
    "vehicle part": "part",
    "part": "part",
    "part supplied": "partSupplied",
    "supply only": "supplyOnly",
    "used condition": "usedCondition",
    "new condition": "newCondition",
    "reconditioned condition": "reconditionedCondition",
    "condition": "reconditionedCondition",
    "consider both": "considerBoth",
    "consider both condition": "considerBoth",
    "consider both conditions": "considerBoth",
    "part condition": "considerBoth",
    "consider all condition": "considerAll",
    "consider all conditions": "considerAll",
    "vehicle drive": "vehicleDrive",
    "drive": "vehicleDrive",
    "collection required": "collectionRequired",
    "collection": "collectionRequired",
    "engine code": "engineCode",
    "additional note": "additionalNote",
    "extra note": "additionalNote",
    "note": "additionalNote",
    "description": "additionalNote",
}

_TRUTHY: FrozenSet[str] = frozenset({"on", "yes", "true"})
_FALSY: FrozenSet[str] = frozenset({"off", "no", "false"})

# Kept per field: the producing forms do not treat every checkbox the same way.
BOOLEAN_TOKENS: Dict[str, Tuple[FrozenSet[str], FrozenSet[str]]] = {
    "partSupplied": (_TRUTHY, _FALSY),
    "supplyOnly": (_TRUTHY, _FALSY),
    "usedCondition": (_TRUTHY, _FALSY),
    "newCondition": (_TRUTHY, _FALSY),
    "reconditionedCondition": (_TRUTHY, _FALSY),
    "considerBoth": (_TRUTHY, _FALSY),
    "considerAll": (_TRUTHY, _FALSY),
    "collectionRequired": (_TRUTHY, _FALSY),
}


def normalize_label(label: str) -> str:
    """Lowercase a label, drop its trailing colon and collapse whitespace."""

    cleaned = (label or "").strip().rstrip(":").strip()
    return " ".join(cleaned.lower().split())


def lookup_label(label: str) -> Optional[str]:
    """Return the canonical key for ``label``.

    The ambiguous registration labels return ``REGISTRATION``; anything not in
    the synonym table returns ``None``.
    """

    return LABEL_SYNONYMS.get(normalize_label(label))


def classify_registration(value: str) -> str:
    """A registration value that is a 1900-2099 year is a year, else a VRM."""

    return "year" if _YEAR_RE.fullmatch((value or "").strip()) else "vrm"


def resolve_field(label: str, value: str) -> Optional[str]:
    key = lookup_label(label)
    if key == REGISTRATION:
        return classify_registration(value)
    return key


def coerce_flag(key: str, token: Optional[str]) -> Optional[bool]:
    """Map a captured checkbox token to True/False, or None when unrecognized."""

    if token is None or key not in BOOLEAN_TOKENS:
        return None
    truthy, falsy = BOOLEAN_TOKENS[key]
    lowered = token.strip().lower()
    if lowered in truthy:
        return True
    if lowered in falsy:
        return False
    return None
