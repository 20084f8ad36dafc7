from django.conf import settings
from django.db import models
from django.utils import timezone

from core.enums import BloodType, Gender
from .enums import ScreeningStatus, DeferralPeriod


class Donor(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="donor")
    blood_type = models.CharField(max_length=16, choices=BloodType.choices)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True)
    weight_kg = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    height_cm = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    medical_history = models.TextField(blank=True)

    # eligibility tracking (see donors.services.eligibility)
    last_donation_date = models.DateTimeField(null=True, blank=True)
    eligible_to_donate_since = models.DateTimeField(null=True, blank=True)
    donation_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["blood_type"], name="donor_blood_type_idx"),
            models.Index(fields=["eligible_to_donate_since"], name="donor_eligible_since_idx"),
        ]

    def is_eligible(self, at=None) -> bool:
        at = at or timezone.now()
        return self.eligible_to_donate_since is None or self.eligible_to_donate_since <= at

    def __str__(self):
        return f"{self.user.full_name} [{self.get_blood_type_display()}]"


class DonorScreening(models.Model):
    donor = models.ForeignKey(Donor, on_delete=models.CASCADE, related_name="screenings")
    screened_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="donor_screenings")
    status = models.CharField(max_length=10, choices=ScreeningStatus.choices, default=ScreeningStatus.PENDING)
    vitals = models.JSONField(default=dict, blank=True)  # {"bp": "120/80", "pulse": 72, "hb": 13.5, ...}
    questionnaire_completed = models.BooleanField(default=False)
    deferral_reason = models.TextField(blank=True)
    deferral_period = models.CharField(max_length=12, choices=DeferralPeriod.choices, blank=True)
    deferred_until = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    screened_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-screened_at"]

    def __str__(self):
        return f"Screening #{self.id} {self.donor_id} {self.status}"
