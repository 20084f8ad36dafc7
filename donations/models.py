from django.conf import settings
from django.db import models
from .enums import DonationStatus


class Donation(models.Model):
    donor = models.ForeignKey("donors.Donor", on_delete=models.PROTECT, related_name="donations")
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="donations_created")
    technician = models.ForeignKey("accounts.BloodBankTechnician", null=True, blank=True, on_delete=models.SET_NULL, related_name="donations")

    scheduled_date = models.DateTimeField()
    actual_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=12, choices=DonationStatus.choices, default=DonationStatus.SCHEDULED)

    # collection vitals
    hemoglobin_level = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    blood_pressure = models.CharField(max_length=16, blank=True)
    pulse = models.PositiveIntegerField(null=True, blank=True)
    volume_ml = models.PositiveIntegerField(null=True, blank=True)
    notes = models.TextField(blank=True)

    # lab screening of the collected blood
    test_results = models.JSONField(default=dict, blank=True)
    rejection_reason = models.TextField(blank=True)
    tested_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="donations_tested")
    tested_at = models.DateTimeField(null=True, blank=True)

    processed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-scheduled_date"]
        indexes = [
            models.Index(fields=["donor", "status"], name="donation_donor_status_idx"),
            models.Index(fields=["scheduled_date"], name="donation_scheduled_idx"),
        ]

    def __str__(self):
        return f"Donation #{self.id} donor={self.donor_id} {self.status}"
