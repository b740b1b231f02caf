"""Acceptance rules applied to assembled leads before they are saved."""
import logging
from typing import List

from leadsync.core.models import Lead

logger = logging.getLogger(__name__)

CONTACT_MISSING = "contact info missing"
BLOCKING_ISSUES = frozenset({CONTACT_MISSING})


def validate_lead(lead: Lead) -> List[str]:
    """Return a list of quality issues for a single lead."""

    issues: List[str] = []

    # Without a way to reach the customer the lead is useless to sales.
    if not ((lead.email or "").strip() or (lead.number or "").strip()):
        issues.append(CONTACT_MISSING)

    if not lead.name:
        issues.append("missing customer name")

    if not (lead.vehicle_brand or lead.vehicle_model or lead.vehicle_vrm or lead.vehicle_part):
        issues.append("no vehicle details")

    return issues


def is_acceptable(lead: Lead) -> bool:
    """A lead is saved only when none of its issues are blocking."""

    issues = validate_lead(lead)
    if issues:
        logger.debug("Quality issues for %s: %s", lead.source, "; ".join(issues))
    return not BLOCKING_ISSUES.intersection(issues)
