from django.db import models


class BloodType(models.TextChoices):
    A_POSITIVE  = "A_POSITIVE", "A+"
    A_NEGATIVE  = "A_NEGATIVE", "A-"
    B_POSITIVE  = "B_POSITIVE", "B+"
    B_NEGATIVE  = "B_NEGATIVE", "B-"
    AB_POSITIVE = "AB_POSITIVE", "AB+"
    AB_NEGATIVE = "AB_NEGATIVE", "AB-"
    O_POSITIVE  = "O_POSITIVE", "O+"
    O_NEGATIVE  = "O_NEGATIVE", "O-"


class Gender(models.TextChoices):
    MALE   = "MALE", "Male"
    FEMALE = "FEMALE", "Female"
    OTHER  = "OTHER", "Other"
