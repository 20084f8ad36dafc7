"""
transfusions/services/fulfillment.py

Recording a transfusion is how a blood request gets fulfilled.

The named units are locked and re-checked inside one transaction: every one
of them must still be AVAILABLE, unexpired and compatible with the request's
blood type. Only then is the Transfusion written, the units marked USED and
attached to it, and the request's running `fulfilled_units` advanced. A
request is FULFILLED once the running total reaches the requested quantity,
PARTIALLY_FULFILLED before that.
"""

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound

from blood_requests.enums import RequestStatus
from blood_requests.models import BloodRequest
from core.compatibility import is_compatible
from core.exceptions import BusinessRuleViolation
from inventory.enums import BloodUnitStatus
from inventory.models import BloodUnit
from transfusions.models import Transfusion

logger = logging.getLogger(__name__)


def record_transfusion(*, medical_officer, patient, request_id: int, unit_ids: list[int], transfusion_date=None, notes: str = "") -> Transfusion:
    if not unit_ids:
        raise BusinessRuleViolation("At least one blood unit is required")
    if len(set(unit_ids)) != len(unit_ids):
        raise BusinessRuleViolation("Blood unit ids must not repeat")

    transfusion_date = transfusion_date or timezone.now()

    with transaction.atomic():
        blood_request = BloodRequest.objects.select_for_update().filter(pk=request_id).first()
        if blood_request is None:
            raise NotFound("Blood request not found")
        if blood_request.is_closed:
            raise BusinessRuleViolation(f"Blood request is already {blood_request.status.lower()}")
        if blood_request.remaining_units == 0:
            raise BusinessRuleViolation("Blood request has already received all requested units")
        if blood_request.patient_id and blood_request.patient_id != patient.pk:
            raise BusinessRuleViolation("Blood request belongs to a different patient")

        units = list(
            BloodUnit.objects.select_for_update()
            .filter(pk__in=unit_ids, status=BloodUnitStatus.AVAILABLE)
        )
        if len(units) != len(unit_ids):
            raise BusinessRuleViolation("One or more blood units are not available")

        now = timezone.now()
        expired = [u.unit_number for u in units if u.expiry_date <= now]
        if expired:
            raise BusinessRuleViolation(f"Blood units past expiry: {', '.join(sorted(expired))}")

        incompatible = [u.unit_number for u in units if not is_compatible(u.blood_type, blood_request.blood_type)]
        if incompatible:
            raise BusinessRuleViolation(
                f"Blood units not compatible with {blood_request.get_blood_type_display()}: {', '.join(sorted(incompatible))}"
            )

        transfusion = Transfusion.objects.create(
            patient=patient,
            request=blood_request,
            medical_officer=medical_officer,
            transfusion_date=transfusion_date,
            notes=notes or "",
        )
        BloodUnit.objects.filter(pk__in=[u.pk for u in units]).update(
            status=BloodUnitStatus.USED,
            transfusion=transfusion,
            updated_at=now,
        )

        BloodRequest.objects.filter(pk=blood_request.pk).update(fulfilled_units=F("fulfilled_units") + len(units))
        blood_request.refresh_from_db(fields=["fulfilled_units"])
        blood_request.status = (
            RequestStatus.FULFILLED
            if blood_request.fulfilled_units >= blood_request.units
            else RequestStatus.PARTIALLY_FULFILLED
        )
        blood_request.save(update_fields=["status", "updated_at"])

    logger.info(
        f"Transfusion {transfusion.pk}: {len(units)} unit(s) to patient {patient.pk} "
        f"against request {blood_request.pk} ({blood_request.fulfilled_units}/{blood_request.units}, {blood_request.status})"
    )
    return transfusion
