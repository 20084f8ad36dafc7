from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from core.enums import BloodType
from .enums import Urgency, RequestStatus


class BloodRequest(models.Model):
    requester = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="blood_requests")
    patient = models.ForeignKey("patients.Patient", null=True, blank=True, on_delete=models.PROTECT, related_name="blood_requests")

    blood_type = models.CharField(max_length=16, choices=BloodType.choices)
    units = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    # running total of units transfused against this request
    fulfilled_units = models.PositiveIntegerField(default=0)

    urgency = models.CharField(max_length=10, choices=Urgency.choices, default=Urgency.NORMAL)
    status = models.CharField(max_length=20, choices=RequestStatus.choices, default=RequestStatus.PENDING)
    reason = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    required_by = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["status", "-created_at"]
        indexes = [
            models.Index(fields=["status", "urgency"], name="bloodreq_status_urgency_idx"),
            models.Index(fields=["blood_type"], name="bloodreq_blood_type_idx"),
        ]

    @property
    def remaining_units(self) -> int:
        return max(self.units - self.fulfilled_units, 0)

    @property
    def is_closed(self) -> bool:
        return self.status in RequestStatus.closed()

    def __str__(self):
        return f"Request #{self.id} {self.units}x {self.get_blood_type_display()} {self.status}"
