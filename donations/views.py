import logging

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.enums import UserRole
from accounts.permissions import HasActionCapability, role_of
from core.exceptions import BusinessRuleViolation
from core.params import query_datetime, query_int
from donors.models import Donor
from donors.services.eligibility import ensure_can_schedule
from inventory.serializers import BloodUnitSerializer
from .enums import DonationStatus
from .models import Donation
from .serializers import (
    DonationSerializer,
    DonationCreateSerializer,
    DonationUpdateSerializer,
    DonationTestSerializer,
    ProcessDonationSerializer,
)
from .services.lifecycle import change_status
from .services.processing import process_donation

logger = logging.getLogger(__name__)


class DonationViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
):
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "update": "donation.update",
        "partial_update": "donation.update",
        "destroy": "donation.delete",
        "process": "donation.process",
        "test": "donation.record_test",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return DonationCreateSerializer
        if self.action in {"update", "partial_update"}:
            return DonationUpdateSerializer
        if self.action == "process":
            return ProcessDonationSerializer
        if self.action == "test":
            return DonationTestSerializer
        return DonationSerializer

    def get_queryset(self):
        u = self.request.user
        q = Donation.objects.select_related("donor__user", "tested_by").order_by("-scheduled_date")
        if role_of(u) == UserRole.DONOR:
            q = q.filter(donor__user_id=u.id)

        p = self.request.query_params
        if p.get("status"):
            q = q.filter(status=p["status"].upper())
        donor_id = query_int(p, "donor")
        if donor_id is not None:
            q = q.filter(donor_id=donor_id)
        start = query_datetime(p, "start_date")
        end = query_datetime(p, "end_date")
        if start:
            q = q.filter(scheduled_date__gte=start)
        if end:
            q = q.filter(scheduled_date__lte=end)
        return q

    def _resolve_donor(self, donor_id):
        u = self.request.user
        if role_of(u) == UserRole.DONOR:
            own = Donor.objects.filter(user_id=u.id).first()
            if own is None:
                raise NotFound("Donor profile not found")
            if donor_id is not None and donor_id != own.pk:
                raise PermissionDenied("Donors can only schedule their own donations.")
            return own
        if donor_id is None:
            raise BusinessRuleViolation("donor_id is required")
        return get_object_or_404(Donor, pk=donor_id)

    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        donor = self._resolve_donor(data.get("donor_id"))
        ensure_can_schedule(donor)

        donation = Donation.objects.create(
            donor=donor,
            created_by=request.user,
            scheduled_date=data["scheduled_date"],
            notes=data.get("notes", ""),
            status=DonationStatus.SCHEDULED,
        )
        logger.info(f"Donation {donation.pk} scheduled for donor {donor.pk} at {donation.scheduled_date}")
        return Response(DonationSerializer(donation).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        donation = self.get_object()
        s = self.get_serializer(donation, data=request.data, partial=partial)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        new_status = data.pop("status", None)

        with transaction.atomic():
            for k, v in data.items():
                setattr(donation, k, v)
            if new_status:
                change_status(donation, new_status)
            technician = getattr(request.user, "technician", None)
            if technician is not None and donation.technician_id is None:
                donation.technician = technician
            donation.save()

        return Response(DonationSerializer(donation).data)

    def perform_destroy(self, instance):
        if instance.blood_units.exists():
            raise BusinessRuleViolation("Cannot delete donation with associated blood units")
        logger.info(f"Donation {instance.pk} deleted by {self.request.user.email}")
        instance.delete()

    @action(detail=True, methods=["post"])
    def process(self, request, pk=None):
        """Split a completed donation into blood-unit components."""
        donation = self.get_object()
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        donation, units = process_donation(
            donation_id=donation.pk,
            components=s.validated_data["components"],
            user=request.user,
        )
        return Response({
            "donation": DonationSerializer(donation).data,
            "blood_units": BloodUnitSerializer(units, many=True).data,
        })

    @action(detail=True, methods=["post"])
    def test(self, request, pk=None):
        """Record screening results for the collected blood."""
        donation = self.get_object()
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        with transaction.atomic():
            donation.test_results = data["test_results"]
            donation.rejection_reason = data.get("rejection_reason", donation.rejection_reason)
            donation.tested_by = request.user
            donation.tested_at = timezone.now()
            if data.get("status"):
                change_status(donation, data["status"])
            donation.save()

        return Response(DonationSerializer(donation).data)

    @action(detail=False, methods=["get"])
    def appointments(self, request):
        """Scheduled slots, optionally for a single calendar day (?date=YYYY-MM-DD)."""
        q = self.get_queryset().order_by("scheduled_date")
        day = query_datetime(request.query_params, "date")
        if day:
            q = q.filter(scheduled_date__date=day.date())
        page = self.paginate_queryset(q)
        if page is not None:
            return self.get_paginated_response(DonationSerializer(page, many=True).data)
        return Response(DonationSerializer(q, many=True).data)
