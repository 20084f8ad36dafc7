from rest_framework import serializers

from inventory.models import BloodUnit
from .models import Transfusion


class TransfusedUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = BloodUnit
        fields = ["id", "unit_number", "blood_type", "component_type", "volume_ml"]


class TransfusionSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)
    medical_officer_name = serializers.CharField(source="medical_officer.user.full_name", read_only=True)
    blood_units = TransfusedUnitSerializer(many=True, read_only=True)

    class Meta:
        model = Transfusion
        fields = [
            "id", "patient_id", "patient_name", "request_id", "medical_officer_id", "medical_officer_name",
            "transfusion_date", "notes", "blood_units", "created_at", "updated_at",
        ]
        read_only_fields = fields


class TransfusionCreateSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField()
    request_id = serializers.IntegerField()
    transfusion_date = serializers.DateTimeField(required=False)
    blood_unit_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class TransfusionUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transfusion
        fields = ["transfusion_date", "notes"]
