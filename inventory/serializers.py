from rest_framework import serializers

from accounts.serializers import UserBriefSerializer
from .enums import BloodUnitStatus
from .models import BloodUnit


class BloodUnitSerializer(serializers.ModelSerializer):
    is_expired = serializers.BooleanField(read_only=True)
    qc_by = UserBriefSerializer(read_only=True)

    class Meta:
        model = BloodUnit
        fields = [
            "id", "unit_number", "blood_type", "component_type", "volume_ml", "status",
            "collection_date", "expiry_date", "is_expired",
            "donation_id", "transfusion_id", "technician", "notes",
            "qc_results", "qc_notes", "qc_by", "qc_at",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class BloodUnitCreateSerializer(serializers.ModelSerializer):
    donation_id = serializers.IntegerField(required=False, allow_null=True)

    class Meta:
        model = BloodUnit
        fields = [
            "unit_number", "blood_type", "component_type", "volume_ml", "status",
            "collection_date", "expiry_date", "donation_id", "notes",
        ]

    def validate_status(self, value):
        if value == BloodUnitStatus.USED:
            raise serializers.ValidationError("A blood unit can only become USED through a transfusion.")
        return value

    def validate(self, attrs):
        if attrs["expiry_date"] <= attrs["collection_date"]:
            raise serializers.ValidationError({"expiry_date": "Expiry date must be after the collection date."})
        return attrs


def check_status_change(unit, new_status):
    """Shared guard for manual status edits (update and quality control)."""
    if new_status is None or new_status == unit.status:
        return
    if new_status == BloodUnitStatus.USED:
        raise serializers.ValidationError({"status": "A blood unit can only become USED through a transfusion."})
    if unit.is_in_use:
        raise serializers.ValidationError({"status": "Cannot change the status of a blood unit used in a transfusion."})


class BloodUnitUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = BloodUnit
        fields = ["status", "notes"]

    def validate_status(self, value):
        check_status_change(self.instance, value)
        return value


class QualityControlSerializer(serializers.Serializer):
    inspection_results = serializers.DictField()
    notes = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=BloodUnitStatus.choices, required=False)
