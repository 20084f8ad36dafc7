import pytest

from accounts.enums import UserRole
from accounts.models import User, MedicalOfficer
from donors.models import Donor

from .conftest import PASSWORD, as_user

pytestmark = pytest.mark.django_db


def test_donor_self_registration_creates_profile(api):
    resp = api.post(
        "/api/accounts/register/",
        {
            "email": "new.donor@bloodbank.test",
            "password": "Plasma-Rich-2024",
            "first_name": "Tunde",
            "last_name": "Bello",
            "profile": {"blood_type": "B_POSITIVE", "gender": "MALE", "weight_kg": "72.5"},
        },
        format="json",
    )
    assert resp.status_code == 201, resp.data
    assert resp.data["user"]["role"] == UserRole.DONOR
    assert resp.data["user"]["profile"]["blood_type"] == "B_POSITIVE"
    assert "access" in resp.data["tokens"]
    assert Donor.objects.get(user__email="new.donor@bloodbank.test").blood_type == "B_POSITIVE"


def test_registration_without_blood_type_creates_nothing(api):
    resp = api.post(
        "/api/accounts/register/",
        {"email": "half@bloodbank.test", "password": "Plasma-Rich-2024", "profile": {}},
        format="json",
    )
    assert resp.status_code == 400
    assert not User.objects.filter(email="half@bloodbank.test").exists()


def test_login_returns_tokens(api, donor_user):
    resp = api.post("/api/accounts/login/", {"email": donor_user.email, "password": PASSWORD}, format="json")
    assert resp.status_code == 200
    assert set(resp.data["tokens"]) == {"access", "refresh"}

    bad = api.post("/api/accounts/login/", {"email": donor_user.email, "password": "nope"}, format="json")
    assert bad.status_code == 400
    assert bad.data["error"] == "Invalid credentials"


def test_bearer_token_authenticates(api, donor_user):
    tokens = api.post("/api/accounts/login/", {"email": donor_user.email, "password": PASSWORD}, format="json").data["tokens"]
    api.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
    resp = api.get("/api/accounts/me/")
    assert resp.status_code == 200
    assert resp.data["email"] == donor_user.email


def test_admin_creates_medical_officer_with_profile(admin_client):
    resp = admin_client.post(
        "/api/users/",
        {
            "email": "dr.eze@bloodbank.test",
            "password": "Crossmatch-77",
            "first_name": "Ngozi",
            "last_name": "Eze",
            "role": "MEDICAL_OFFICER",
            "profile": {"license_number": "MDCN-5521", "department": "Obstetrics"},
        },
        format="json",
    )
    assert resp.status_code == 201, resp.data
    assert resp.data["profile"]["license_number"] == "MDCN-5521"
    assert MedicalOfficer.objects.filter(user__email="dr.eze@bloodbank.test").exists()


def test_profile_is_validated_for_the_role(admin_client):
    resp = admin_client.post(
        "/api/users/",
        {"email": "tech@bloodbank.test", "password": "Crossmatch-77", "role": "BLOOD_BANK_TECHNICIAN",
         "profile": {"license_number": "nope"}},
        format="json",
    )
    assert resp.status_code == 400
    assert "employee_id" in resp.data["details"]["profile"]
    assert not User.objects.filter(email="tech@bloodbank.test").exists()


def test_admin_profile_payload_is_rejected(admin_client):
    resp = admin_client.post(
        "/api/users/",
        {"email": "boss@bloodbank.test", "password": "Crossmatch-77", "role": "ADMIN", "profile": {"x": 1}},
        format="json",
    )
    assert resp.status_code == 400


def test_duplicate_email_is_rejected(admin_client, donor_user):
    resp = admin_client.post(
        "/api/users/",
        {"email": donor_user.email, "password": "Crossmatch-77", "role": "ADMIN"},
        format="json",
    )
    assert resp.status_code == 400


def test_only_admin_lists_users(admin_client, donor_client):
    assert admin_client.get("/api/users/").status_code == 200
    assert donor_client.get("/api/users/").status_code == 403


def test_self_or_admin_for_user_detail(donor_client, donor_user, make_user, admin_client):
    other = make_user(UserRole.DONOR)
    assert donor_client.get(f"/api/users/{donor_user.pk}/").status_code == 200
    assert donor_client.get(f"/api/users/{other.pk}/").status_code == 403
    assert admin_client.get(f"/api/users/{other.pk}/").status_code == 200


def test_update_own_profile(officer_client, officer_user):
    resp = officer_client.put(
        f"/api/users/{officer_user.pk}/profile/",
        {"phone_number": "+2348011112222", "profile": {"department": "Surgery"}},
        format="json",
    )
    assert resp.status_code == 200, resp.data
    officer_user.refresh_from_db()
    assert officer_user.phone_number == "+2348011112222"
    assert MedicalOfficer.objects.get(user=officer_user).department == "Surgery"


def test_change_password(donor_user):
    client = as_user(donor_user)
    wrong = client.post(
        f"/api/users/{donor_user.pk}/change-password/",
        {"current_password": "wrong", "new_password": "Fresh-Plasma-99"},
        format="json",
    )
    assert wrong.status_code == 400
    assert "incorrect" in wrong.data["error"]

    ok = client.post(
        f"/api/users/{donor_user.pk}/change-password/",
        {"current_password": PASSWORD, "new_password": "Fresh-Plasma-99"},
        format="json",
    )
    assert ok.status_code == 200
    donor_user.refresh_from_db()
    assert donor_user.check_password("Fresh-Plasma-99")


def test_cannot_change_someone_elses_password(admin_client, donor_user):
    resp = admin_client.post(
        f"/api/users/{donor_user.pk}/change-password/",
        {"current_password": PASSWORD, "new_password": "Fresh-Plasma-99"},
        format="json",
    )
    assert resp.status_code == 403


def test_admin_deletes_user_but_not_self(admin_client, admin_user, make_user):
    victim = make_user(UserRole.BLOOD_BANK_TECHNICIAN)
    assert admin_client.delete(f"/api/users/{victim.pk}/").status_code == 204
    assert admin_client.delete(f"/api/users/{admin_user.pk}/").status_code == 400
