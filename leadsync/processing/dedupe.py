import hashlib
from datetime import datetime, timezone
from typing import Optional


def make_dedupe_key(email: Optional[str], number: Optional[str], received_at: datetime) -> str:
    """
    Generate a stable dedupe key for a lead.

    Identity is (email, phone number, received timestamp):
    - email lowercased and trimmed
    - phone number trimmed, kept as written
    - timestamp as ISO-8601 in UTC

    Missing parts hash as empty strings, so a phone-only lead still gets a
    stable key. The lead store enforces uniqueness on this value.
    """
    mail = (email or "").strip().lower()
    phone = (number or "").strip()
    stamp = received_at.astimezone(timezone.utc).isoformat()

    core = f"{mail}|{phone}|{stamp}"
    return hashlib.sha256(core.encode("utf-8")).hexdigest()
