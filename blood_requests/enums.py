from django.db import models

class Urgency(models.TextChoices):
    LOW      = "LOW", "Low"
    NORMAL   = "NORMAL", "Normal"
    HIGH     = "HIGH", "High"
    CRITICAL = "CRITICAL", "Critical"

class RequestStatus(models.TextChoices):
    PENDING             = "PENDING", "Pending"
    APPROVED            = "APPROVED", "Approved"
    PARTIALLY_FULFILLED = "PARTIALLY_FULFILLED", "Partially fulfilled"
    FULFILLED           = "FULFILLED", "Fulfilled"
    REJECTED            = "REJECTED", "Rejected"
    CANCELLED           = "CANCELLED", "Cancelled"

    @classmethod
    def closed(cls):
        return {cls.FULFILLED, cls.REJECTED, cls.CANCELLED}
