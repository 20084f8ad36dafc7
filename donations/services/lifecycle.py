"""
donations/services/lifecycle.py

Donation status transitions. PROCESSED is only reachable through
donations.services.processing.process_donation.
"""

import logging

from core.exceptions import BusinessRuleViolation
from donors.services.eligibility import record_completed_donation
from donations.enums import DonationStatus

logger = logging.getLogger(__name__)

S = DonationStatus

ALLOWED_TRANSITIONS = {
    S.SCHEDULED: {S.COMPLETED, S.CANCELLED, S.DEFERRED},
    S.DEFERRED: {S.SCHEDULED, S.CANCELLED},
    S.COMPLETED: set(),
    S.CANCELLED: set(),
    S.PROCESSED: set(),
}


def change_status(donation, new_status) -> bool:
    """
    Move a donation to `new_status` in memory; the caller saves it.

    Completing a donation updates the donor's eligibility right away.
    Returns False when the status is unchanged.
    """
    old = donation.status
    if new_status == old:
        return False
    if new_status not in ALLOWED_TRANSITIONS.get(old, set()):
        raise BusinessRuleViolation(f"Cannot change donation status from {old} to {new_status}")

    donation.status = new_status
    if new_status == S.COMPLETED:
        record_completed_donation(donation)
    logger.info(f"Donation {donation.pk}: {old} -> {new_status}")
    return True
