import re
from datetime import timedelta
from unittest import mock

import pytest
from django.utils import timezone

from core.enums import BloodType
from core.exceptions import BusinessRuleViolation
from donations.enums import DonationStatus
from donations.models import Donation
from donations.services import processing
from donations.services.processing import process_donation
from inventory.enums import BloodUnitStatus, ComponentType
from inventory.models import BloodUnit

pytestmark = pytest.mark.django_db

COMPONENTS = [
    {"type": "RED_CELLS", "volume": 280, "expiry_days": 35},
    {"type": "PLASMA", "volume": 200, "expiry_days": 365},
]


def test_process_splits_donation_into_units(tech_client, completed_donation):
    before = timezone.now()
    resp = tech_client.post(f"/api/donations/{completed_donation.pk}/process/", {"components": COMPONENTS}, format="json")
    after = timezone.now()
    assert resp.status_code == 200, resp.data
    assert resp.data["donation"]["status"] == DonationStatus.PROCESSED
    assert len(resp.data["blood_units"]) == 2

    completed_donation.refresh_from_db()
    assert completed_donation.status == DonationStatus.PROCESSED
    assert completed_donation.processed_at is not None

    rbc = BloodUnit.objects.get(donation=completed_donation, component_type=ComponentType.RED_CELLS)
    pls = BloodUnit.objects.get(donation=completed_donation, component_type=ComponentType.PLASMA)
    assert before + timedelta(days=35) <= rbc.expiry_date <= after + timedelta(days=35)
    assert before + timedelta(days=365) <= pls.expiry_date <= after + timedelta(days=365)
    for unit in (rbc, pls):
        assert unit.status == BloodUnitStatus.AVAILABLE
        assert unit.blood_type == completed_donation.donor.blood_type
        assert unit.collection_date == completed_donation.actual_date
        assert unit.technician is not None
    assert re.fullmatch(rf"BU-{completed_donation.pk:05d}-RBC-[0-9A-F]{{6}}", rbc.unit_number)
    assert "-PLS-" in pls.unit_number


def test_component_blood_type_override(completed_donation):
    _, units = process_donation(
        donation_id=completed_donation.pk,
        components=[{"type": "PLATELETS", "volume": 50, "expiry_days": 5, "blood_type": BloodType.B_NEGATIVE}],
    )
    assert units[0].blood_type == BloodType.B_NEGATIVE


@pytest.mark.parametrize("status", [DonationStatus.SCHEDULED, DonationStatus.PROCESSED, DonationStatus.CANCELLED])
def test_only_completed_donations_can_be_processed(tech_client, donor, status):
    donation = Donation.objects.create(donor=donor, scheduled_date=timezone.now(), status=status)
    resp = tech_client.post(f"/api/donations/{donation.pk}/process/", {"components": COMPONENTS}, format="json")
    assert resp.status_code == 400
    assert not BloodUnit.objects.filter(donation=donation).exists()


def test_empty_component_list_is_rejected(tech_client, completed_donation):
    resp = tech_client.post(f"/api/donations/{completed_donation.pk}/process/", {"components": []}, format="json")
    assert resp.status_code == 400


def test_donor_cannot_process(donor_client, completed_donation):
    resp = donor_client.post(f"/api/donations/{completed_donation.pk}/process/", {"components": COMPONENTS}, format="json")
    assert resp.status_code == 403


def test_failure_midway_rolls_back_every_unit(completed_donation):
    real_create = BloodUnit.objects.create
    calls = {"n": 0}

    def flaky_create(**kwargs):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("disk full")
        return real_create(**kwargs)

    with mock.patch.object(BloodUnit.objects, "create", side_effect=flaky_create):
        with pytest.raises(RuntimeError):
            process_donation(donation_id=completed_donation.pk, components=COMPONENTS)

    completed_donation.refresh_from_db()
    assert completed_donation.status == DonationStatus.COMPLETED
    assert not BloodUnit.objects.filter(donation=completed_donation).exists()


def test_unit_number_collision_is_retried(completed_donation, make_unit):
    make_unit(unit_number="BU-TAKEN")
    numbers = iter(["BU-TAKEN", "BU-FRESH-1"])

    with mock.patch.object(processing, "generate_unit_number", side_effect=lambda *a: next(numbers)):
        _, units = process_donation(donation_id=completed_donation.pk, components=COMPONENTS[:1])

    assert units[0].unit_number == "BU-FRESH-1"


def test_unit_number_collisions_exhaust_attempts(settings, completed_donation, make_unit):
    settings.UNIT_NUMBER_ATTEMPTS = 3
    make_unit(unit_number="BU-TAKEN")

    with mock.patch.object(processing, "generate_unit_number", return_value="BU-TAKEN"):
        with pytest.raises(BusinessRuleViolation):
            process_donation(donation_id=completed_donation.pk, components=COMPONENTS)

    completed_donation.refresh_from_db()
    assert completed_donation.status == DonationStatus.COMPLETED
    assert BloodUnit.objects.filter(donation=completed_donation).count() == 0
