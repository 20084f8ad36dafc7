from django.contrib import admin
from inventory.models import BloodUnit
from .models import Donation

class BloodUnitInline(admin.TabularInline):
    model = BloodUnit
    fk_name = "donation"
    extra = 0
    fields = ("unit_number", "component_type", "blood_type", "volume_ml", "status", "expiry_date")
    readonly_fields = fields
    can_delete = False

@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ("id", "donor", "scheduled_date", "actual_date", "status", "processed_at")
    list_filter = ("status",)
    search_fields = ("donor__user__email", "donor__user__last_name")
    raw_id_fields = ("donor", "created_by", "technician", "tested_by")
    inlines = [BloodUnitInline]
