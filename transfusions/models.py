from django.db import models


class Transfusion(models.Model):
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="transfusions")
    request = models.ForeignKey("blood_requests.BloodRequest", on_delete=models.PROTECT, related_name="transfusions")
    medical_officer = models.ForeignKey("accounts.MedicalOfficer", on_delete=models.PROTECT, related_name="transfusions")
    transfusion_date = models.DateTimeField()
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-transfusion_date"]
        indexes = [models.Index(fields=["patient", "transfusion_date"], name="transfusion_patient_date_idx")]

    def __str__(self):
        return f"Transfusion #{self.id} patient={self.patient_id} request={self.request_id}"
