import logging

from django.db.models import Count
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.permissions import HasActionCapability
from core.enums import BloodType
from core.exceptions import BusinessRuleViolation
from core.params import query_datetime, query_int
from donations.enums import DonationStatus
from donations.models import Donation
from .models import BloodUnit
from .serializers import (
    BloodUnitSerializer,
    BloodUnitCreateSerializer,
    BloodUnitUpdateSerializer,
    QualityControlSerializer,
    check_status_change,
)

logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes")


class BloodUnitViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
):
    """
    Blood-unit inventory.

    Query params: blood_type, status, component_type, donation,
    expiry_before (ISO datetime), available_only, expiring_soon.
    Expiry is evaluated at query time; nothing flips a unit to EXPIRED on its own.
    """
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "create": "blood_unit.create",
        "update": "blood_unit.update",
        "partial_update": "blood_unit.update",
        "destroy": "blood_unit.delete",
        "quality_control": "blood_unit.quality_control",
        "stock_summary": "blood_unit.stock_summary",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return BloodUnitCreateSerializer
        if self.action in {"update", "partial_update"}:
            return BloodUnitUpdateSerializer
        if self.action == "quality_control":
            return QualityControlSerializer
        return BloodUnitSerializer

    def get_queryset(self):
        q = BloodUnit.objects.select_related("qc_by").order_by("expiry_date")
        p = self.request.query_params
        if p.get("blood_type"):
            q = q.filter(blood_type=p["blood_type"].upper())
        if p.get("status"):
            q = q.filter(status=p["status"].upper())
        if p.get("component_type"):
            q = q.filter(component_type=p["component_type"].upper())
        donation_id = query_int(p, "donation")
        if donation_id is not None:
            q = q.filter(donation_id=donation_id)
        expiry_before = query_datetime(p, "expiry_before")
        if expiry_before:
            q = q.filter(expiry_date__lte=expiry_before)
        if (p.get("available_only") or "").lower() in TRUTHY:
            q = q.available()
        if (p.get("expiring_soon") or "").lower() in TRUTHY:
            q = q.expiring_within()
        return q

    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        donation_id = s.validated_data.pop("donation_id", None)

        donation = None
        if donation_id is not None:
            donation = get_object_or_404(Donation, pk=donation_id)
            if donation.status not in {DonationStatus.COMPLETED, DonationStatus.PROCESSED}:
                raise BusinessRuleViolation("Blood units can only be added to completed donations")

        unit = s.save(donation=donation, technician=getattr(request.user, "technician", None))
        logger.info(f"Blood unit {unit.unit_number} registered by {request.user.email}")
        return Response(BloodUnitSerializer(unit).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        super().update(request, *args, **kwargs)
        return Response(BloodUnitSerializer(self.get_object()).data)

    def perform_destroy(self, instance):
        if instance.is_in_use:
            raise BusinessRuleViolation("Cannot delete blood unit that has been used in a transfusion")
        logger.info(f"Blood unit {instance.unit_number} deleted by {self.request.user.email}")
        instance.delete()

    @action(detail=True, methods=["post"], url_path="quality-control")
    def quality_control(self, request, pk=None):
        unit = self.get_object()
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        check_status_change(unit, data.get("status"))
        unit.qc_results = data["inspection_results"]
        unit.qc_notes = data.get("notes", "")
        unit.qc_by = request.user
        unit.qc_at = timezone.now()
        if data.get("status"):
            unit.status = data["status"]
        unit.save()
        logger.info(f"QC recorded for {unit.unit_number} by {request.user.email} (status {unit.status})")
        return Response(BloodUnitSerializer(unit).data)

    @action(detail=False, methods=["get"], url_path="status")
    def stock_summary(self, request):
        """Available units per blood type; every type is present, zero when out of stock."""
        counts = dict(
            BloodUnit.objects.available()
            .values_list("blood_type")
            .annotate(n=Count("id"))
            .order_by()
        )
        return Response({bt: counts.get(bt, 0) for bt in BloodType.values})
