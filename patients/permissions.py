from rest_framework.exceptions import PermissionDenied

from accounts.enums import UserRole
from accounts.permissions import role_of


def ensure_assigned(user, patient):
    """Medical officers may only work with patients assigned to them."""
    if role_of(user) != UserRole.MEDICAL_OFFICER:
        return
    officer = getattr(user, "medical_officer", None)
    if officer is None or patient.medical_officer_id != officer.pk:
        raise PermissionDenied("You can only access patients assigned to you.")
