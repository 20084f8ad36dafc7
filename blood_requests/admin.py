from django.contrib import admin
from .models import BloodRequest

@admin.register(BloodRequest)
class BloodRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "blood_type", "units", "fulfilled_units", "urgency", "status", "patient", "requester", "created_at")
    list_filter = ("status", "urgency", "blood_type")
    search_fields = ("patient__hospital_id", "patient__last_name", "requester__email")
    raw_id_fields = ("patient", "requester")
