"""
donors/services/eligibility.py

Donor eligibility tracking.

A donor may give blood again DONATION_ELIGIBILITY_DAYS (56 by default) after
their last completed donation. The date is stored on the donor as
`eligible_to_donate_since`; a null value means the donor has never donated
(or was cleared) and may schedule immediately.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db.models import F
from django.utils import timezone

from core.exceptions import BusinessRuleViolation
from donors.enums import DeferralPeriod, ScreeningStatus

logger = logging.getLogger(__name__)

DEFERRAL_DAYS = {
    DeferralPeriod.ONE_MONTH: 30,
    DeferralPeriod.THREE_MONTHS: 90,
    DeferralPeriod.SIX_MONTHS: 180,
    DeferralPeriod.TWELVE_MONTHS: 365,
    DeferralPeriod.PERMANENT: 365 * 100,
}


def eligibility_window() -> timedelta:
    return timedelta(days=int(getattr(settings, "DONATION_ELIGIBILITY_DAYS", 56)))


def next_eligible_date(donated_at):
    """When a donor who gave blood at `donated_at` may donate again."""
    return donated_at + eligibility_window()


def ensure_can_schedule(donor, at=None):
    """Raise BusinessRuleViolation if the donor is still inside their waiting window."""
    at = at or timezone.now()
    if donor.is_eligible(at):
        return
    until = timezone.localtime(donor.eligible_to_donate_since).date().isoformat()
    raise BusinessRuleViolation(f"Donor is not eligible to donate until {until}")


def record_completed_donation(donation):
    """
    Apply a donation's completion to its donor.

    Uses the donation's actual date, falling back to now (which is then stored
    on the donation). Updates last donation date, next eligible date and the
    donation counter. The caller saves the donation.
    """
    if donation.actual_date is None:
        donation.actual_date = timezone.now()

    donor = donation.donor
    donor.last_donation_date = donation.actual_date
    donor.eligible_to_donate_since = next_eligible_date(donation.actual_date)
    donor.donation_count = F("donation_count") + 1
    donor.save(update_fields=["last_donation_date", "eligible_to_donate_since", "donation_count", "updated_at"])
    donor.refresh_from_db(fields=["donation_count"])

    logger.info(
        f"Donation {donation.pk} completed; donor {donor.pk} eligible again from {donor.eligible_to_donate_since:%Y-%m-%d}"
    )
    return donor


def deferral_end(period: str, at=None):
    at = at or timezone.now()
    return at + timedelta(days=DEFERRAL_DAYS[period])


def apply_screening(screening):
    """
    Push the donor's eligibility according to a screening outcome.

    DEFERRED moves `eligible_to_donate_since` to the end of the deferral
    (never earlier than an existing waiting window). ELIGIBLE lifts a
    deferral set by an earlier screening but leaves the post-donation
    window alone.
    """
    donor = screening.donor
    now = screening.screened_at or timezone.now()

    if screening.status == ScreeningStatus.DEFERRED:
        until = deferral_end(screening.deferral_period or DeferralPeriod.ONE_MONTH, now)
        if donor.eligible_to_donate_since is None or donor.eligible_to_donate_since < until:
            donor.eligible_to_donate_since = until
            donor.save(update_fields=["eligible_to_donate_since", "updated_at"])
        screening.deferred_until = until
        logger.info(f"Donor {donor.pk} deferred until {until:%Y-%m-%d} ({screening.deferral_period})")

    elif screening.status == ScreeningStatus.ELIGIBLE:
        floor = next_eligible_date(donor.last_donation_date) if donor.last_donation_date else None
        current = donor.eligible_to_donate_since
        if current and current > now and (floor is None or current > floor):
            donor.eligible_to_donate_since = floor if floor and floor > now else None
            donor.save(update_fields=["eligible_to_donate_since", "updated_at"])
            logger.info(f"Donor {donor.pk} deferral lifted by screening")

    return donor
