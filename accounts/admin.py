from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, MedicalOfficer, BloodBankTechnician

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email", "role", "first_name", "last_name", "is_active", "is_staff", "last_login")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("email", "first_name", "last_name")
    ordering = ("-date_joined",)
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Personal info", {"fields": ("first_name", "last_name", "phone_number", "address")}),
        ("Blood bank", {"fields": ("role",)}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "role", "password1", "password2")}),
    )

@admin.register(MedicalOfficer)
class MedicalOfficerAdmin(admin.ModelAdmin):
    list_display = ("user", "license_number", "department", "position")
    search_fields = ("license_number", "user__email", "user__last_name")
    raw_id_fields = ("user",)

@admin.register(BloodBankTechnician)
class BloodBankTechnicianAdmin(admin.ModelAdmin):
    list_display = ("user", "employee_id", "specialization")
    search_fields = ("employee_id", "user__email", "user__last_name")
    raw_id_fields = ("user",)
