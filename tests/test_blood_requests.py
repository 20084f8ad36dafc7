import pytest
from django.utils import timezone

from accounts.enums import UserRole
from blood_requests.enums import RequestStatus
from blood_requests.models import BloodRequest
from core.enums import BloodType
from transfusions.models import Transfusion

from .conftest import as_user

pytestmark = pytest.mark.django_db


def test_create_request(officer_client, officer_user, patient):
    resp = officer_client.post(
        "/api/blood-requests/",
        {"patient_id": patient.pk, "blood_type": "A_POSITIVE", "units": 2, "urgency": "CRITICAL", "reason": "Post-partum haemorrhage"},
        format="json",
    )
    assert resp.status_code == 201, resp.data
    assert resp.data["status"] == RequestStatus.PENDING
    assert resp.data["fulfilled_units"] == 0
    assert resp.data["remaining_units"] == 2
    assert resp.data["requester"]["id"] == officer_user.pk


def test_create_request_for_unknown_patient_is_404(officer_client):
    resp = officer_client.post("/api/blood-requests/", {"patient_id": 31337, "blood_type": "O_NEGATIVE", "units": 1}, format="json")
    assert resp.status_code == 404
    assert not BloodRequest.objects.exists()


def test_units_must_be_positive(officer_client, patient):
    resp = officer_client.post("/api/blood-requests/", {"patient_id": patient.pk, "blood_type": "O_NEGATIVE", "units": 0}, format="json")
    assert resp.status_code == 400


def test_unauthenticated_create_is_401(api):
    resp = api.post("/api/blood-requests/", {"blood_type": "O_NEGATIVE", "units": 1}, format="json")
    assert resp.status_code == 401


def test_officers_see_only_their_requests(officer_client, officer_user, make_user, admin_client):
    mine = BloodRequest.objects.create(requester=officer_user, blood_type=BloodType.O_NEGATIVE, units=1)
    other_officer = make_user(UserRole.MEDICAL_OFFICER)
    theirs = BloodRequest.objects.create(requester=other_officer, blood_type=BloodType.O_NEGATIVE, units=1)

    ids = [r["id"] for r in officer_client.get("/api/blood-requests/").data]
    assert ids == [mine.pk]
    assert officer_client.get(f"/api/blood-requests/{theirs.pk}/").status_code == 403

    all_ids = {r["id"] for r in admin_client.get("/api/blood-requests/").data}
    assert all_ids == {mine.pk, theirs.pk}


def test_list_filters(tech_client, officer_user):
    BloodRequest.objects.create(requester=officer_user, blood_type=BloodType.O_NEGATIVE, units=1, urgency="HIGH")
    BloodRequest.objects.create(requester=officer_user, blood_type=BloodType.A_POSITIVE, units=1, urgency="LOW")

    resp = tech_client.get("/api/blood-requests/", {"blood_type": "O_NEGATIVE", "urgency": "HIGH"})
    assert len(resp.data) == 1


def test_technician_approves_request(tech_client, blood_request):
    resp = tech_client.patch(f"/api/blood-requests/{blood_request.pk}/", {"status": "APPROVED", "notes": "Crossmatch done"}, format="json")
    assert resp.status_code == 200, resp.data
    assert resp.data["status"] == RequestStatus.APPROVED


def test_officer_cannot_change_request_status(officer_client, blood_request):
    resp = officer_client.patch(f"/api/blood-requests/{blood_request.pk}/", {"status": "APPROVED"}, format="json")
    assert resp.status_code == 403


def test_fulfilled_cannot_be_set_without_units(tech_client, blood_request):
    resp = tech_client.patch(f"/api/blood-requests/{blood_request.pk}/", {"status": "FULFILLED"}, format="json")
    assert resp.status_code == 400
    blood_request.refresh_from_db()
    assert blood_request.status == RequestStatus.PENDING


def test_fulfilled_request_cannot_be_reopened(tech_client, officer_client, blood_request, make_unit):
    units = [make_unit(blood_type=BloodType.A_POSITIVE) for _ in range(2)]
    resp = officer_client.post(
        "/api/transfusions/",
        {"patient_id": blood_request.patient_id, "request_id": blood_request.pk, "blood_unit_ids": [u.pk for u in units]},
        format="json",
    )
    assert resp.status_code == 201, resp.data

    resp = tech_client.patch(f"/api/blood-requests/{blood_request.pk}/", {"status": "PENDING"}, format="json")
    assert resp.status_code == 400
    blood_request.refresh_from_db()
    assert blood_request.status == RequestStatus.FULFILLED

    extra = make_unit(blood_type=BloodType.A_POSITIVE)
    resp = officer_client.post(
        "/api/transfusions/",
        {"patient_id": blood_request.patient_id, "request_id": blood_request.pk, "blood_unit_ids": [extra.pk]},
        format="json",
    )
    assert resp.status_code == 400
    blood_request.refresh_from_db()
    assert blood_request.fulfilled_units == 2


@pytest.mark.parametrize("target", ["PENDING", "APPROVED"])
def test_partially_fulfilled_request_cannot_go_back(tech_client, blood_request, target):
    blood_request.fulfilled_units = 1
    blood_request.status = RequestStatus.PARTIALLY_FULFILLED
    blood_request.save()

    resp = tech_client.patch(f"/api/blood-requests/{blood_request.pk}/", {"status": target}, format="json")
    assert resp.status_code == 400
    assert "already been transfused" in resp.data["error"]

    resp = tech_client.patch(f"/api/blood-requests/{blood_request.pk}/", {"status": "CANCELLED"}, format="json")
    assert resp.status_code == 200


def test_request_with_transfusions_cannot_be_deleted(admin_client, officer_user, blood_request):
    Transfusion.objects.create(
        patient=blood_request.patient, request=blood_request,
        medical_officer=officer_user.medical_officer, transfusion_date=timezone.now(),
    )
    resp = admin_client.delete(f"/api/blood-requests/{blood_request.pk}/")
    assert resp.status_code == 400
    assert BloodRequest.objects.filter(pk=blood_request.pk).exists()


def test_requester_or_admin_deletes(officer_client, tech_user, blood_request):
    assert as_user(tech_user).delete(f"/api/blood-requests/{blood_request.pk}/").status_code == 403
    assert officer_client.delete(f"/api/blood-requests/{blood_request.pk}/").status_code == 204
