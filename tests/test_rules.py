from datetime import datetime, timezone as dt_timezone

import pytest

from accounts.enums import UserRole
from accounts.permissions import CAPABILITIES, is_allowed
from core.compatibility import compatible_donor_types, is_compatible
from core.enums import BloodType
from donors.services.eligibility import next_eligible_date
from inventory.enums import COMPONENT_CODES, ComponentType


@pytest.mark.parametrize("role,capability,expected", [
    (UserRole.ADMIN, "blood_unit.delete", True),
    (UserRole.BLOOD_BANK_TECHNICIAN, "blood_unit.delete", False),
    (UserRole.BLOOD_BANK_TECHNICIAN, "blood_unit.create", True),
    (UserRole.MEDICAL_OFFICER, "blood_unit.create", False),
    (UserRole.MEDICAL_OFFICER, "transfusion.create", True),
    (UserRole.ADMIN, "transfusion.create", False),
    (UserRole.DONOR, "donation.process", False),
    (UserRole.MEDICAL_OFFICER, "blood_unit.stock_summary", True),
    (UserRole.DONOR, "blood_unit.stock_summary", False),
])
def test_capability_table(role, capability, expected):
    assert is_allowed(role, capability) is expected


def test_unknown_capability_and_missing_role_are_denied():
    assert is_allowed(UserRole.ADMIN, "blood_unit.teleport") is False
    assert is_allowed(None, "blood_unit.create") is False
    assert is_allowed("", "user.list") is False


def test_role_names_are_case_insensitive():
    assert is_allowed("admin", "user.list") is True


def test_every_capability_grants_only_known_roles():
    known = set(UserRole.values)
    for capability, roles in CAPABILITIES.items():
        assert roles, capability
        assert roles <= known, capability


def test_universal_donor_and_recipient():
    for recipient in BloodType.values:
        assert is_compatible(BloodType.O_NEGATIVE, recipient)
    assert compatible_donor_types(BloodType.AB_POSITIVE) == frozenset(BloodType.values)
    assert compatible_donor_types(BloodType.O_NEGATIVE) == frozenset({BloodType.O_NEGATIVE})


def test_rh_negative_recipient_cannot_receive_positive():
    assert not is_compatible(BloodType.A_POSITIVE, BloodType.A_NEGATIVE)
    assert not is_compatible(BloodType.B_NEGATIVE, BloodType.A_NEGATIVE)
    assert is_compatible(BloodType.A_NEGATIVE, BloodType.AB_NEGATIVE)


def test_next_eligible_date_is_56_days_after_donation():
    donated = datetime(2024, 1, 1, 9, 0, tzinfo=dt_timezone.utc)
    assert next_eligible_date(donated) == datetime(2024, 2, 26, 9, 0, tzinfo=dt_timezone.utc)


def test_eligibility_window_follows_setting(settings):
    settings.DONATION_ELIGIBILITY_DAYS = 84
    donated = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
    assert next_eligible_date(donated) == datetime(2024, 3, 25, tzinfo=dt_timezone.utc)


def test_each_component_has_a_three_letter_code():
    assert set(COMPONENT_CODES) == set(ComponentType)
    assert ComponentType.code_for("RED_CELLS") == "RBC"
    assert ComponentType.code_for(ComponentType.PLASMA) == "PLS"
    assert all(len(code) == 3 for code in COMPONENT_CODES.values())
