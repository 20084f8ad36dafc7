from rest_framework import serializers

from accounts.serializers import UserBriefSerializer
from .enums import RequestStatus
from .models import BloodRequest


class BloodRequestSerializer(serializers.ModelSerializer):
    requester = UserBriefSerializer(read_only=True)
    patient_name = serializers.SerializerMethodField()
    remaining_units = serializers.IntegerField(read_only=True)

    class Meta:
        model = BloodRequest
        fields = [
            "id", "requester", "patient_id", "patient_name", "blood_type", "units", "fulfilled_units",
            "remaining_units", "urgency", "status", "reason", "notes", "required_by",
            "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_patient_name(self, obj):
        return obj.patient.full_name if obj.patient_id else None


class BloodRequestCreateSerializer(serializers.ModelSerializer):
    patient_id = serializers.IntegerField(required=False, allow_null=True)
    units = serializers.IntegerField(min_value=1)

    class Meta:
        model = BloodRequest
        fields = ["patient_id", "blood_type", "units", "urgency", "reason", "notes", "required_by"]


class BloodRequestUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = BloodRequest
        fields = ["status", "notes"]

    def validate_status(self, value):
        req = self.instance
        if req.status == RequestStatus.FULFILLED and value != RequestStatus.FULFILLED:
            raise serializers.ValidationError("A fulfilled request cannot change status.")
        if value in {RequestStatus.PENDING, RequestStatus.APPROVED} and req.fulfilled_units > 0:
            raise serializers.ValidationError(
                f"{req.fulfilled_units} unit(s) have already been transfused against this request."
            )
        if value == RequestStatus.FULFILLED and req.fulfilled_units < req.units:
            raise serializers.ValidationError(
                f"Only {req.fulfilled_units} of {req.units} unit(s) have been transfused; record a transfusion first."
            )
        if value == RequestStatus.PARTIALLY_FULFILLED and req.fulfilled_units == 0:
            raise serializers.ValidationError("No units have been transfused against this request yet.")
        return value
