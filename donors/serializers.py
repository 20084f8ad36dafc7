from rest_framework import serializers

from accounts.serializers import UserBriefSerializer
from donations.models import Donation
from .enums import ScreeningStatus
from .models import Donor, DonorScreening


class RecentDonationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Donation
        fields = ["id", "scheduled_date", "actual_date", "status", "volume_ml"]


class DonorSerializer(serializers.ModelSerializer):
    user = UserBriefSerializer(read_only=True)
    is_eligible = serializers.SerializerMethodField()

    class Meta:
        model = Donor
        fields = [
            "id", "user", "blood_type", "date_of_birth", "gender", "weight_kg", "height_cm",
            "medical_history", "last_donation_date", "eligible_to_donate_since", "donation_count",
            "is_eligible", "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_is_eligible(self, obj):
        return obj.is_eligible()


class DonorDetailSerializer(DonorSerializer):
    recent_donations = serializers.SerializerMethodField()

    class Meta(DonorSerializer.Meta):
        fields = DonorSerializer.Meta.fields + ["recent_donations"]
        read_only_fields = fields

    def get_recent_donations(self, obj):
        qs = obj.donations.order_by("-scheduled_date")[:5]
        return RecentDonationSerializer(qs, many=True).data


class DonorEligibilityUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Donor
        fields = ["eligible_to_donate_since", "medical_history"]


class DonorScreeningSerializer(serializers.ModelSerializer):
    donor_id = serializers.IntegerField()
    screened_by = UserBriefSerializer(read_only=True)

    class Meta:
        model = DonorScreening
        fields = [
            "id", "donor_id", "screened_by", "status", "vitals", "questionnaire_completed",
            "deferral_reason", "deferral_period", "deferred_until", "notes", "screened_at",
        ]
        read_only_fields = ["id", "screened_by", "deferred_until", "screened_at"]

    def validate(self, attrs):
        if attrs.get("status") == ScreeningStatus.DEFERRED and not attrs.get("deferral_period"):
            raise serializers.ValidationError({"deferral_period": "A deferral period is required when deferring a donor."})
        return attrs
