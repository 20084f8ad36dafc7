from django.contrib import admin
from inventory.models import BloodUnit
from .models import Transfusion

class TransfusedUnitInline(admin.TabularInline):
    model = BloodUnit
    fk_name = "transfusion"
    extra = 0
    fields = ("unit_number", "blood_type", "component_type", "volume_ml")
    readonly_fields = fields
    can_delete = False

@admin.register(Transfusion)
class TransfusionAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "request", "medical_officer", "transfusion_date")
    search_fields = ("patient__hospital_id", "patient__last_name")
    raw_id_fields = ("patient", "request", "medical_officer")
    inlines = [TransfusedUnitInline]
