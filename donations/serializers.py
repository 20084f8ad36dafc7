from rest_framework import serializers

from accounts.serializers import UserBriefSerializer
from core.enums import BloodType
from inventory.enums import ComponentType
from .enums import DonationStatus
from .models import Donation


class DonationSerializer(serializers.ModelSerializer):
    donor_name = serializers.CharField(source="donor.user.full_name", read_only=True)
    donor_blood_type = serializers.CharField(source="donor.blood_type", read_only=True)
    tested_by = UserBriefSerializer(read_only=True)
    blood_unit_count = serializers.SerializerMethodField()

    class Meta:
        model = Donation
        fields = [
            "id", "donor_id", "donor_name", "donor_blood_type", "created_by", "technician",
            "scheduled_date", "actual_date", "status",
            "hemoglobin_level", "blood_pressure", "pulse", "volume_ml", "notes",
            "test_results", "rejection_reason", "tested_by", "tested_at",
            "processed_at", "blood_unit_count", "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_blood_unit_count(self, obj):
        return obj.blood_units.count()


class DonationCreateSerializer(serializers.Serializer):
    # optional for donors booking their own slot
    donor_id = serializers.IntegerField(required=False)
    scheduled_date = serializers.DateTimeField()
    notes = serializers.CharField(required=False, allow_blank=True)


class DonationUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Donation
        fields = ["scheduled_date", "actual_date", "status", "hemoglobin_level", "blood_pressure", "pulse", "volume_ml", "notes"]

    def validate_status(self, value):
        if value == DonationStatus.PROCESSED:
            raise serializers.ValidationError("Use the process endpoint to turn a donation into blood units.")
        return value


class DonationTestSerializer(serializers.Serializer):
    test_results = serializers.DictField()
    status = serializers.ChoiceField(choices=DonationStatus.choices, required=False)
    rejection_reason = serializers.CharField(required=False, allow_blank=True)

    def validate_status(self, value):
        if value == DonationStatus.PROCESSED:
            raise serializers.ValidationError("Use the process endpoint to turn a donation into blood units.")
        return value


class ComponentSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=ComponentType.choices)
    blood_type = serializers.ChoiceField(choices=BloodType.choices, required=False)
    volume = serializers.IntegerField(min_value=1)
    expiry_days = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True)


class ProcessDonationSerializer(serializers.Serializer):
    components = ComponentSerializer(many=True, allow_empty=False)
