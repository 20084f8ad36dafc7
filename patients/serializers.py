from rest_framework import serializers

from .models import Patient, MedicalRecord


class PatientSerializer(serializers.ModelSerializer):
    medical_officer_id = serializers.IntegerField(required=False, allow_null=True)
    medical_officer_name = serializers.SerializerMethodField()

    class Meta:
        model = Patient
        fields = [
            "id", "hospital_id", "first_name", "last_name", "date_of_birth", "gender", "blood_type",
            "contact_number", "address", "medical_officer_id", "medical_officer_name",
            "created_at", "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_medical_officer_name(self, obj):
        mo = obj.medical_officer
        return mo.user.full_name if mo else None


class MedicalRecordSerializer(serializers.ModelSerializer):
    patient_id = serializers.IntegerField()
    medical_officer_name = serializers.CharField(source="medical_officer.user.full_name", read_only=True)

    class Meta:
        model = MedicalRecord
        fields = [
            "id", "patient_id", "medical_officer_id", "medical_officer_name",
            "record_type", "title", "details", "created_at", "updated_at",
        ]
        read_only_fields = ["medical_officer_id", "created_at", "updated_at"]
