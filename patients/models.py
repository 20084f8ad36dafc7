from django.core.validators import RegexValidator
from django.db import models

from core.enums import BloodType, Gender
from .enums import RecordType

phone_validator = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message="Contact number must contain 7 to 15 digits, optionally prefixed with +.",
)

class Patient(models.Model):
    hospital_id = models.CharField(
        max_length=40,
        unique=True,
        error_messages={"unique": "Patient with this hospital ID already exists."},
    )
    first_name = models.CharField(max_length=120)
    last_name = models.CharField(max_length=120)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=Gender.choices)
    blood_type = models.CharField(max_length=16, choices=BloodType.choices)
    contact_number = models.CharField(max_length=20, validators=[phone_validator], blank=True)
    address = models.TextField(blank=True)

    # attending officer; scopes what a medical officer can see
    medical_officer = models.ForeignKey("accounts.MedicalOfficer", null=True, blank=True, on_delete=models.SET_NULL, related_name="patients")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["last_name", "first_name"]
        indexes = [
            models.Index(fields=["last_name", "first_name"], name="patient_name_idx"),
            models.Index(fields=["blood_type"], name="patient_blood_type_idx"),
        ]

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def __str__(self):
        return f"{self.full_name} ({self.hospital_id})"


class MedicalRecord(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="medical_records")
    medical_officer = models.ForeignKey("accounts.MedicalOfficer", on_delete=models.PROTECT, related_name="medical_records")
    record_type = models.CharField(max_length=16, choices=RecordType.choices, default=RecordType.NOTE)
    title = models.CharField(max_length=200)
    details = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.get_record_type_display()}: {self.title}"
