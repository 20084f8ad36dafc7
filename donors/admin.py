from django.contrib import admin
from .models import Donor, DonorScreening

class ScreeningInline(admin.TabularInline):
    model = DonorScreening
    extra = 0
    fields = ("status", "deferral_period", "deferred_until", "screened_by", "screened_at")
    readonly_fields = ("deferred_until", "screened_at")

@admin.register(Donor)
class DonorAdmin(admin.ModelAdmin):
    list_display = ("user", "blood_type", "donation_count", "last_donation_date", "eligible_to_donate_since")
    search_fields = ("user__email", "user__first_name", "user__last_name")
    list_filter = ("blood_type", "gender")
    raw_id_fields = ("user",)
    inlines = [ScreeningInline]

@admin.register(DonorScreening)
class DonorScreeningAdmin(admin.ModelAdmin):
    list_display = ("donor", "status", "deferral_period", "deferred_until", "screened_by", "screened_at")
    list_filter = ("status", "deferral_period")
    raw_id_fields = ("donor", "screened_by")
