from django.db import models

class UserRole(models.TextChoices):
    ADMIN                 = "ADMIN", "Admin"
    MEDICAL_OFFICER       = "MEDICAL_OFFICER", "Medical Officer"
    BLOOD_BANK_TECHNICIAN = "BLOOD_BANK_TECHNICIAN", "Blood Bank Technician"
    DONOR                 = "DONOR", "Donor"

    @classmethod
    def staff_roles(cls):
        return {cls.ADMIN, cls.MEDICAL_OFFICER, cls.BLOOD_BANK_TECHNICIAN}
