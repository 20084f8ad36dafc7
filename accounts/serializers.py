from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from donors.models import Donor
from .enums import UserRole
from .models import User, MedicalOfficer, BloodBankTechnician


class UserBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "first_name", "last_name", "role"]


# --- Role profiles ---
class DonorProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Donor
        fields = ["id", "blood_type", "date_of_birth", "gender", "weight_kg", "height_cm", "medical_history",
                  "last_donation_date", "eligible_to_donate_since", "donation_count"]
        read_only_fields = ["id", "last_donation_date", "eligible_to_donate_since", "donation_count"]

class MedicalOfficerProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = MedicalOfficer
        fields = ["id", "license_number", "department", "position"]
        read_only_fields = ["id"]

class TechnicianProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = BloodBankTechnician
        fields = ["id", "employee_id", "specialization"]
        read_only_fields = ["id"]


# Profile data is a tagged union keyed by role: role -> (related attribute, serializer).
# ADMIN users carry no profile.
PROFILE_TYPES = {
    UserRole.DONOR: ("donor", DonorProfileSerializer),
    UserRole.MEDICAL_OFFICER: ("medical_officer", MedicalOfficerProfileSerializer),
    UserRole.BLOOD_BANK_TECHNICIAN: ("technician", TechnicianProfileSerializer),
}


def get_profile(user):
    entry = PROFILE_TYPES.get(user.role)
    if entry is None:
        return None
    return getattr(user, entry[0], None)


def profile_data(user):
    entry = PROFILE_TYPES.get(user.role)
    profile = get_profile(user)
    if entry is None or profile is None:
        return None
    return entry[1](profile).data


def bind_profile(role, data, instance=None, partial=False):
    """
    Validate `data` with the profile serializer registered for `role`.
    Returns the bound serializer (ready to save) or None for roles without a profile.
    """
    entry = PROFILE_TYPES.get(role)
    if entry is None:
        if data:
            raise serializers.ValidationError({"profile": f"{role} users do not have a profile."})
        return None
    ser = entry[1](instance=instance, data=data or {}, partial=partial)
    if not ser.is_valid():
        raise serializers.ValidationError({"profile": ser.errors})
    return ser


# --- Users ---
class UserSerializer(serializers.ModelSerializer):
    profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "first_name", "last_name", "role", "phone_number", "address",
                  "is_active", "date_joined", "profile"]
        read_only_fields = fields

    def get_profile(self, obj):
        return profile_data(obj)


class UserCreateSerializer(serializers.ModelSerializer):
    """Admin creates a user of any role together with its role profile."""
    password = serializers.CharField(write_only=True, min_length=8)
    profile = serializers.DictField(required=False, write_only=True)

    class Meta:
        model = User
        fields = ["email", "password", "first_name", "last_name", "role", "phone_number", "address", "profile"]

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate(self, attrs):
        role = attrs.get("role", UserRole.DONOR)
        self._profile = bind_profile(role, attrs.get("profile"))
        return attrs

    @transaction.atomic
    def create(self, validated):
        validated.pop("profile", None)
        pwd = validated.pop("password")
        user = User.objects.create_user(password=pwd, **validated)
        if self._profile is not None:
            self._profile.save(user=user)
        return user


class UserUpdateSerializer(serializers.ModelSerializer):
    profile = serializers.DictField(required=False, write_only=True)

    class Meta:
        model = User
        fields = ["first_name", "last_name", "phone_number", "address", "profile"]

    def validate(self, attrs):
        user = self.instance
        self._profile = None
        if "profile" in attrs:
            current = get_profile(user)
            self._profile = bind_profile(user.role, attrs["profile"], instance=current, partial=current is not None)
        return attrs

    @transaction.atomic
    def update(self, instance, validated):
        validated.pop("profile", None)
        for k, v in validated.items():
            setattr(instance, k, v)
        instance.save()
        if self._profile is not None:
            if self._profile.instance is None:
                self._profile.save(user=instance)
            else:
                self._profile.save()
        return instance


class RegisterSerializer(serializers.ModelSerializer):
    """Donor self-registration: the user and the donor profile are created together."""
    password = serializers.CharField(write_only=True, min_length=8)
    profile = DonorProfileSerializer(write_only=True)

    class Meta:
        model = User
        fields = ["email", "password", "first_name", "last_name", "phone_number", "address", "profile"]

    def validate_password(self, value):
        validate_password(value)
        return value

    @transaction.atomic
    def create(self, validated):
        profile = validated.pop("profile")
        pwd = validated.pop("password")
        user = User.objects.create_user(password=pwd, role=UserRole.DONOR, **validated)
        Donor.objects.create(user=user, **profile)
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    def validate(self, data):
        user = authenticate(email=data["email"], password=data["password"])
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        data["user"] = user
        return data


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=8)

    def validate_current_password(self, value):
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect")
        return value

    def validate_new_password(self, value):
        validate_password(value, user=self.context["request"].user)
        return value

    def save(self, **kwargs):
        user = self.context["request"].user
        user.set_password(self.validated_data["new_password"])
        user.save(update_fields=["password"])
        return user
