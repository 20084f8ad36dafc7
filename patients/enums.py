from django.db import models

class RecordType(models.TextChoices):
    DIAGNOSIS   = "DIAGNOSIS", "Diagnosis"
    TREATMENT   = "TREATMENT", "Treatment"
    LAB_RESULT  = "LAB_RESULT", "Lab Result"
    TRANSFUSION = "TRANSFUSION", "Transfusion"
    NOTE        = "NOTE", "Note"
