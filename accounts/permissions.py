"""
accounts/permissions.py

Role-based authorization. Which role may do what lives in one table,
CAPABILITIES, and `is_allowed(role, capability)` is a pure lookup into it.

Viewsets declare `capability_map = {action_name: capability}`; the
`HasActionCapability` permission checks the current action against the table.
Actions missing from the map only require an authenticated user. Row-level
scoping (a medical officer seeing only their own requests, a donor only their
own donations) stays in each view's queryset.
"""

from rest_framework.permissions import BasePermission
from .enums import UserRole

ADMIN = UserRole.ADMIN
MO = UserRole.MEDICAL_OFFICER
TECH = UserRole.BLOOD_BANK_TECHNICIAN
DONOR = UserRole.DONOR

CAPABILITIES: dict[str, frozenset[str]] = {
    # users
    "user.list":                  frozenset({ADMIN}),
    "user.create":                frozenset({ADMIN}),
    "user.delete":                frozenset({ADMIN}),
    # donors
    "donor.update_eligibility":   frozenset({ADMIN, TECH}),
    "donor.view_any":             frozenset({ADMIN, MO, TECH}),
    "donor.screen":               frozenset({ADMIN, MO}),
    # donations
    "donation.update":            frozenset({ADMIN, TECH}),
    "donation.process":           frozenset({ADMIN, TECH}),
    "donation.record_test":       frozenset({ADMIN, TECH}),
    "donation.delete":            frozenset({ADMIN}),
    # blood units
    "blood_unit.create":          frozenset({ADMIN, TECH}),
    "blood_unit.update":          frozenset({ADMIN, TECH}),
    "blood_unit.quality_control": frozenset({ADMIN, TECH}),
    "blood_unit.delete":          frozenset({ADMIN}),
    "blood_unit.stock_summary":   frozenset({ADMIN, MO, TECH}),
    # blood requests
    "blood_request.update":       frozenset({ADMIN, TECH}),
    # transfusions
    "transfusion.create":         frozenset({MO}),
    "transfusion.update":         frozenset({MO}),
    # patients
    "patient.create":             frozenset({ADMIN, MO}),
    "patient.view":               frozenset({ADMIN, MO, TECH}),
    "patient.update":             frozenset({ADMIN, MO}),
    "patient.delete":             frozenset({ADMIN}),
    "medical_record.manage":      frozenset({ADMIN, MO}),
}


def is_allowed(role, capability: str) -> bool:
    """Pure check of (role, capability). Unknown capabilities are denied."""
    return (role or "").upper() in CAPABILITIES.get(capability, frozenset())


class HasActionCapability(BasePermission):
    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        u = request.user
        if not (u and u.is_authenticated):
            return False
        capability = getattr(view, "capability_map", {}).get(getattr(view, "action", None))
        if capability is None:
            return True
        return is_allowed(getattr(u, "role", ""), capability)


def role_of(user) -> str:
    return (getattr(user, "role", "") or "").upper()
