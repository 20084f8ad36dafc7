from django.contrib import admin
from .models import Patient, MedicalRecord

class MedicalRecordInline(admin.StackedInline):
    model = MedicalRecord
    extra = 0
    raw_id_fields = ("medical_officer",)

@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("hospital_id", "first_name", "last_name", "blood_type", "gender", "medical_officer", "created_at")
    search_fields = ("hospital_id", "first_name", "last_name")
    list_filter = ("blood_type", "gender")
    raw_id_fields = ("medical_officer",)
    inlines = [MedicalRecordInline]

@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ("patient", "record_type", "title", "medical_officer", "created_at")
    list_filter = ("record_type",)
    search_fields = ("patient__hospital_id", "title")
