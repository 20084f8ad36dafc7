from django.db import models

class DonationStatus(models.TextChoices):
    SCHEDULED = "SCHEDULED", "Scheduled"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"
    DEFERRED  = "DEFERRED", "Deferred"
    PROCESSED = "PROCESSED", "Processed"
