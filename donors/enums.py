from django.db import models

class ScreeningStatus(models.TextChoices):
    PENDING  = "PENDING", "Pending"
    ELIGIBLE = "ELIGIBLE", "Eligible"
    DEFERRED = "DEFERRED", "Deferred"

class DeferralPeriod(models.TextChoices):
    ONE_MONTH    = "1-month", "1 month"
    THREE_MONTHS = "3-months", "3 months"
    SIX_MONTHS   = "6-months", "6 months"
    TWELVE_MONTHS = "12-months", "12 months"
    PERMANENT    = "permanent", "Permanent"
