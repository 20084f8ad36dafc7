import itertools
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.enums import UserRole
from accounts.models import User, MedicalOfficer, BloodBankTechnician
from blood_requests.models import BloodRequest
from core.enums import BloodType
from donations.enums import DonationStatus
from donations.models import Donation
from donors.models import Donor
from inventory.enums import BloodUnitStatus, ComponentType
from inventory.models import BloodUnit
from patients.models import Patient

_seq = itertools.count(1)

PASSWORD = "Transfuse-Me-42!"


@pytest.fixture(autouse=True)
def fast_passwords(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def api():
    return APIClient()


def as_user(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def make_user(db):
    def _make(role=UserRole.DONOR, **extra):
        n = next(_seq)
        blood_type = extra.pop("blood_type", BloodType.O_POSITIVE)
        extra.setdefault("email", f"user{n}@bloodbank.test")
        extra.setdefault("first_name", "Test")
        extra.setdefault("last_name", f"User{n}")
        user = User.objects.create_user(password=PASSWORD, role=role, **extra)
        if role == UserRole.MEDICAL_OFFICER:
            MedicalOfficer.objects.create(user=user, license_number=f"MO-{n:04d}", department="Haematology")
        elif role == UserRole.BLOOD_BANK_TECHNICIAN:
            BloodBankTechnician.objects.create(user=user, employee_id=f"T-{n:04d}")
        elif role == UserRole.DONOR:
            Donor.objects.create(user=user, blood_type=blood_type)
        return user
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def officer_user(make_user):
    return make_user(UserRole.MEDICAL_OFFICER)


@pytest.fixture
def tech_user(make_user):
    return make_user(UserRole.BLOOD_BANK_TECHNICIAN)


@pytest.fixture
def donor_user(make_user):
    return make_user(UserRole.DONOR)


@pytest.fixture
def admin_client(admin_user):
    return as_user(admin_user)


@pytest.fixture
def officer_client(officer_user):
    return as_user(officer_user)


@pytest.fixture
def tech_client(tech_user):
    return as_user(tech_user)


@pytest.fixture
def donor_client(donor_user):
    return as_user(donor_user)


@pytest.fixture
def donor(donor_user):
    return donor_user.donor


@pytest.fixture
def completed_donation(donor):
    return Donation.objects.create(
        donor=donor,
        scheduled_date=timezone.now() - timedelta(hours=2),
        actual_date=timezone.now() - timedelta(hours=1),
        status=DonationStatus.COMPLETED,
    )


@pytest.fixture
def patient(officer_user):
    return Patient.objects.create(
        hospital_id=f"H-{next(_seq):05d}",
        first_name="Ada",
        last_name="Obi",
        date_of_birth="1990-05-04",
        gender="FEMALE",
        blood_type=BloodType.A_POSITIVE,
        medical_officer=officer_user.medical_officer,
    )


@pytest.fixture
def make_unit(db):
    def _make(**fields):
        now = timezone.now()
        fields.setdefault("unit_number", f"U-{next(_seq):06d}")
        fields.setdefault("blood_type", BloodType.O_NEGATIVE)
        fields.setdefault("component_type", ComponentType.RED_CELLS)
        fields.setdefault("status", BloodUnitStatus.AVAILABLE)
        fields.setdefault("collection_date", now - timedelta(days=1))
        fields.setdefault("expiry_date", now + timedelta(days=30))
        return BloodUnit.objects.create(**fields)
    return _make


@pytest.fixture
def blood_request(officer_user, patient):
    return BloodRequest.objects.create(
        requester=officer_user,
        patient=patient,
        blood_type=BloodType.A_POSITIVE,
        units=2,
    )
