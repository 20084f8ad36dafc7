"""
donations/services/processing.py

Turns a COMPLETED donation into blood-unit inventory.

Each requested component becomes one AVAILABLE BloodUnit. Unit numbers look
like BU-00042-RBC-9F3A1C: donation id, component code, random suffix. The
unit_number column is unique; on a collision the insert is retried with a
fresh suffix inside a savepoint.
"""

import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from core.exceptions import BusinessRuleViolation
from donations.enums import DonationStatus
from donations.models import Donation
from inventory.enums import BloodUnitStatus, ComponentType
from inventory.models import BloodUnit

logger = logging.getLogger(__name__)


def generate_unit_number(donation_id: int, component_type: str) -> str:
    code = ComponentType.code_for(component_type)
    return f"BU-{donation_id:05d}-{code}-{secrets.token_hex(3).upper()}"


def _create_unit(donation, fields: dict) -> BloodUnit:
    attempts = int(getattr(settings, "UNIT_NUMBER_ATTEMPTS", 5))
    for attempt in range(1, attempts + 1):
        unit_number = generate_unit_number(donation.pk, fields["component_type"])
        try:
            with transaction.atomic():
                return BloodUnit.objects.create(unit_number=unit_number, donation=donation, **fields)
        except IntegrityError:
            logger.warning(f"Unit number collision on {unit_number} (attempt {attempt}/{attempts})")
    raise BusinessRuleViolation("Could not allocate a unique unit number. Please retry.")


def process_donation(*, donation_id: int, components: list[dict], user=None):
    """
    Create one blood unit per component and mark the donation PROCESSED.

    Each component is a dict with `type`, `volume`, `expiry_days` and
    optionally `blood_type` (defaults to the donor's) and `notes`.
    Everything happens in one transaction: if any unit fails, no unit is
    kept and the donation stays COMPLETED.

    Returns (donation, [units]).
    """
    if not components:
        raise BusinessRuleViolation("At least one component is required")

    technician = getattr(user, "technician", None) if user is not None else None

    with transaction.atomic():
        donation = (
            Donation.objects.select_for_update()
            .select_related("donor")
            .filter(pk=donation_id)
            .first()
        )
        if donation is None:
            raise NotFound("Donation not found")
        if donation.status != DonationStatus.COMPLETED:
            raise BusinessRuleViolation("Only completed donations can be processed")

        now = timezone.now()
        collected = donation.actual_date or now
        units = []
        for comp in components:
            units.append(_create_unit(donation, {
                "blood_type": comp.get("blood_type") or donation.donor.blood_type,
                "component_type": comp["type"],
                "volume_ml": comp["volume"],
                "status": BloodUnitStatus.AVAILABLE,
                "collection_date": collected,
                "expiry_date": now + timedelta(days=comp["expiry_days"]),
                "technician": technician,
                "notes": comp.get("notes", ""),
            }))

        donation.status = DonationStatus.PROCESSED
        donation.processed_at = now
        update_fields = ["status", "processed_at", "updated_at"]
        if technician is not None and donation.technician_id is None:
            donation.technician = technician
            update_fields.append("technician")
        donation.save(update_fields=update_fields)

    logger.info(f"Donation {donation.pk} processed into {len(units)} unit(s): {', '.join(u.unit_number for u in units)}")
    return donation, units
