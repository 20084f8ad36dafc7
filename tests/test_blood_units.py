from datetime import timedelta

import pytest
from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.enums import BloodType
from donations.enums import DonationStatus
from donations.models import Donation
from inventory.enums import BloodUnitStatus
from inventory.models import BloodUnit
from transfusions.models import Transfusion

pytestmark = pytest.mark.django_db


def _payload(**overrides):
    now = timezone.now()
    data = {
        "unit_number": "U100",
        "blood_type": BloodType.A_POSITIVE,
        "component_type": "WHOLE_BLOOD",
        "volume_ml": 450,
        "collection_date": (now - timedelta(days=1)).isoformat(),
        "expiry_date": (now + timedelta(days=30)).isoformat(),
    }
    data.update(overrides)
    return data


def test_unit_numbers_are_unique(tech_client):
    first = tech_client.post("/api/blood-units/", _payload(), format="json")
    assert first.status_code == 201, first.data
    assert first.data["status"] == BloodUnitStatus.AVAILABLE

    second = tech_client.post("/api/blood-units/", _payload(), format="json")
    assert second.status_code == 400
    assert "already exists" in second.data["error"]
    assert BloodUnit.objects.filter(unit_number="U100").count() == 1


def test_unauthenticated_requests_get_401(api):
    assert api.get("/api/blood-units/").status_code == 401
    assert api.post("/api/blood-units/", _payload(), format="json").status_code == 401


def test_medical_officer_cannot_register_units(officer_client):
    resp = officer_client.post("/api/blood-units/", _payload(), format="json")
    assert resp.status_code == 403
    assert "error" in resp.data


def test_units_cannot_be_created_as_used(tech_client):
    resp = tech_client.post("/api/blood-units/", _payload(status="USED"), format="json")
    assert resp.status_code == 400


def test_unknown_donation_is_404(tech_client):
    resp = tech_client.post("/api/blood-units/", _payload(donation_id=424242), format="json")
    assert resp.status_code == 404


def test_donation_must_be_completed(tech_client, donor):
    donation = Donation.objects.create(donor=donor, scheduled_date=timezone.now(), status=DonationStatus.SCHEDULED)
    resp = tech_client.post("/api/blood-units/", _payload(donation_id=donation.pk), format="json")
    assert resp.status_code == 400


def test_list_filters_and_orders_by_expiry(tech_client, make_unit):
    now = timezone.now()
    late = make_unit(blood_type=BloodType.A_POSITIVE, expiry_date=now + timedelta(days=40))
    soon = make_unit(blood_type=BloodType.A_POSITIVE, expiry_date=now + timedelta(days=3))
    make_unit(blood_type=BloodType.B_POSITIVE)
    make_unit(blood_type=BloodType.A_POSITIVE, status=BloodUnitStatus.DISCARDED)

    resp = tech_client.get("/api/blood-units/", {"blood_type": "A_POSITIVE", "available_only": "true"})
    assert [u["id"] for u in resp.data] == [soon.pk, late.pk]


def test_expiring_soon_excludes_expired_and_unavailable(tech_client, make_unit):
    now = timezone.now()
    soon = make_unit(expiry_date=now + timedelta(days=2))
    make_unit(expiry_date=now - timedelta(hours=1))
    make_unit(expiry_date=now + timedelta(days=20))
    make_unit(expiry_date=now + timedelta(days=2), status=BloodUnitStatus.QUARANTINED)

    resp = tech_client.get("/api/blood-units/", {"expiring_soon": "true"})
    assert [u["id"] for u in resp.data] == [soon.pk]


def test_expired_units_keep_their_status(tech_client, make_unit):
    unit = make_unit(expiry_date=timezone.now() - timedelta(days=1))
    resp = tech_client.get(f"/api/blood-units/{unit.pk}/")
    assert resp.data["status"] == BloodUnitStatus.AVAILABLE
    assert resp.data["is_expired"] is True


def _used_unit(make_unit, officer_user, blood_request):
    transfusion = Transfusion.objects.create(
        patient=blood_request.patient,
        request=blood_request,
        medical_officer=officer_user.medical_officer,
        transfusion_date=timezone.now(),
    )
    return make_unit(status=BloodUnitStatus.USED, transfusion=transfusion)


def test_used_unit_cannot_be_deleted(admin_client, make_unit, officer_user, blood_request):
    unit = _used_unit(make_unit, officer_user, blood_request)
    resp = admin_client.delete(f"/api/blood-units/{unit.pk}/")
    assert resp.status_code == 400
    assert "transfusion" in resp.data["error"]
    unit.refresh_from_db()
    assert unit.status == BloodUnitStatus.USED


def test_only_admin_deletes_units(tech_client, admin_client, make_unit):
    unit = make_unit()
    assert tech_client.delete(f"/api/blood-units/{unit.pk}/").status_code == 403
    assert admin_client.delete(f"/api/blood-units/{unit.pk}/").status_code == 204
    assert not BloodUnit.objects.filter(pk=unit.pk).exists()


def test_used_status_only_through_transfusion(tech_client, make_unit):
    unit = make_unit()
    resp = tech_client.patch(f"/api/blood-units/{unit.pk}/", {"status": "USED"}, format="json")
    assert resp.status_code == 400
    unit.refresh_from_db()
    assert unit.status == BloodUnitStatus.AVAILABLE


def test_transfused_unit_status_is_frozen(tech_client, make_unit, officer_user, blood_request):
    unit = _used_unit(make_unit, officer_user, blood_request)
    resp = tech_client.patch(f"/api/blood-units/{unit.pk}/", {"status": "AVAILABLE"}, format="json")
    assert resp.status_code == 400


def test_technician_discards_unit(tech_client, make_unit):
    unit = make_unit()
    resp = tech_client.patch(f"/api/blood-units/{unit.pk}/", {"status": "DISCARDED", "notes": "Bag leak"}, format="json")
    assert resp.status_code == 200, resp.data
    assert resp.data["status"] == BloodUnitStatus.DISCARDED
    assert resp.data["notes"] == "Bag leak"


def test_quality_control_is_recorded(tech_client, tech_user, make_unit):
    unit = make_unit(status=BloodUnitStatus.QUARANTINED)
    resp = tech_client.post(
        f"/api/blood-units/{unit.pk}/quality-control/",
        {"inspection_results": {"haemolysis": "none", "clots": False}, "notes": "Passed", "status": "AVAILABLE"},
        format="json",
    )
    assert resp.status_code == 200, resp.data
    unit.refresh_from_db()
    assert unit.status == BloodUnitStatus.AVAILABLE
    assert unit.qc_results["haemolysis"] == "none"
    assert unit.qc_by == tech_user
    assert unit.qc_at is not None


def test_stock_summary_counts_available_units(officer_client, donor_client, make_unit):
    make_unit(blood_type=BloodType.O_NEGATIVE)
    make_unit(blood_type=BloodType.O_NEGATIVE)
    make_unit(blood_type=BloodType.A_POSITIVE)
    make_unit(blood_type=BloodType.A_POSITIVE, status=BloodUnitStatus.RESERVED)

    resp = officer_client.get("/api/blood-units/status/")
    assert resp.status_code == 200
    assert resp.data["O_NEGATIVE"] == 2
    assert resp.data["A_POSITIVE"] == 1
    assert resp.data["AB_NEGATIVE"] == 0

    assert donor_client.get("/api/blood-units/status/").status_code == 403


def test_check_expiring_units_only_marks_with_flag(make_unit, capsys):
    past = make_unit(expiry_date=timezone.now() - timedelta(days=1))
    soon = make_unit(expiry_date=timezone.now() + timedelta(days=2))

    call_command("check_expiring_units")
    past.refresh_from_db()
    assert past.status == BloodUnitStatus.AVAILABLE
    assert soon.unit_number in capsys.readouterr().out

    call_command("check_expiring_units", "--mark-expired", "--dry-run")
    past.refresh_from_db()
    assert past.status == BloodUnitStatus.AVAILABLE

    call_command("check_expiring_units", "--mark-expired")
    past.refresh_from_db()
    soon.refresh_from_db()
    assert past.status == BloodUnitStatus.EXPIRED
    assert soon.status == BloodUnitStatus.AVAILABLE


def test_used_unit_without_transfusion_is_refused_by_database(make_unit):
    unit = make_unit()
    unit.status = BloodUnitStatus.USED
    with pytest.raises(IntegrityError), transaction.atomic():
        unit.save()
    assert BloodUnit.objects.get(pk=unit.pk).status == BloodUnitStatus.AVAILABLE


@pytest.mark.parametrize("params", [
    {"donation": "abc"},
    {"expiry_before": "garbage"},
    {"expiry_before": "2024-13-40T00:00:00"},
])
def test_malformed_filters_are_rejected(tech_client, params):
    resp = tech_client.get("/api/blood-units/", params)
    assert resp.status_code == 400
    assert resp.data["error"].startswith(next(iter(params)))
