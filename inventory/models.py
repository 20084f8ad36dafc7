from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.enums import BloodType
from .enums import BloodUnitStatus, ComponentType


class BloodUnitQuerySet(models.QuerySet):
    def available(self):
        return self.filter(status=BloodUnitStatus.AVAILABLE)

    def expiring_within(self, days=None, at=None):
        """AVAILABLE units that have not expired yet but will within `days`."""
        at = at or timezone.now()
        days = days if days is not None else getattr(settings, "EXPIRY_WARNING_DAYS", 7)
        return self.available().filter(expiry_date__gt=at, expiry_date__lte=at + timedelta(days=days))

    def past_expiry(self, at=None):
        return self.filter(expiry_date__lte=at or timezone.now())


class BloodUnit(models.Model):
    unit_number = models.CharField(
        max_length=40,
        unique=True,
        error_messages={"unique": "Blood unit with this unit number already exists."},
    )
    blood_type = models.CharField(max_length=16, choices=BloodType.choices)
    component_type = models.CharField(max_length=20, choices=ComponentType.choices, default=ComponentType.WHOLE_BLOOD)
    volume_ml = models.PositiveIntegerField(default=450)
    status = models.CharField(max_length=12, choices=BloodUnitStatus.choices, default=BloodUnitStatus.AVAILABLE)

    collection_date = models.DateTimeField()
    expiry_date = models.DateTimeField()

    donation = models.ForeignKey("donations.Donation", null=True, blank=True, on_delete=models.PROTECT, related_name="blood_units")
    transfusion = models.ForeignKey("transfusions.Transfusion", null=True, blank=True, on_delete=models.PROTECT, related_name="blood_units")
    technician = models.ForeignKey("accounts.BloodBankTechnician", null=True, blank=True, on_delete=models.SET_NULL, related_name="blood_units")
    notes = models.TextField(blank=True)

    # quality control
    qc_results = models.JSONField(default=dict, blank=True)
    qc_notes = models.TextField(blank=True)
    qc_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="blood_units_inspected")
    qc_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BloodUnitQuerySet.as_manager()

    class Meta:
        ordering = ["expiry_date"]
        indexes = [
            models.Index(fields=["blood_type", "status"], name="bloodunit_type_status_idx"),
            models.Index(fields=["expiry_date"], name="bloodunit_expiry_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(status=BloodUnitStatus.USED) | Q(transfusion__isnull=False),
                name="bloodunit_used_has_transfusion",
            ),
        ]

    @property
    def is_expired(self) -> bool:
        return self.expiry_date <= timezone.now()

    @property
    def is_in_use(self) -> bool:
        return self.status == BloodUnitStatus.USED or self.transfusion_id is not None

    def __str__(self):
        return f"{self.unit_number} {self.get_blood_type_display()} {self.status}"
