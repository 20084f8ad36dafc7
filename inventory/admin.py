from django.contrib import admin
from .models import BloodUnit

@admin.register(BloodUnit)
class BloodUnitAdmin(admin.ModelAdmin):
    list_display = ("unit_number", "blood_type", "component_type", "volume_ml", "status", "expiry_date", "donation", "transfusion")
    search_fields = ("unit_number",)
    list_filter = ("status", "blood_type", "component_type")
    raw_id_fields = ("donation", "transfusion", "technician", "qc_by")
    date_hierarchy = "expiry_date"
