import logging

from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.permissions import HasActionCapability, is_allowed, role_of
from core.params import query_int
from .models import Donor, DonorScreening
from .serializers import (
    DonorSerializer,
    DonorDetailSerializer,
    DonorEligibilityUpdateSerializer,
    DonorScreeningSerializer,
)
from .services.eligibility import apply_screening

logger = logging.getLogger(__name__)


class DonorViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
):
    """
    Donor profiles. Staff see every donor, a donor sees only their own profile.
    ADMIN/TECHNICIAN may adjust eligibility date and medical history.
    """
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "update": "donor.update_eligibility",
        "partial_update": "donor.update_eligibility",
    }

    def get_serializer_class(self):
        if self.action == "retrieve":
            return DonorDetailSerializer
        if self.action in {"update", "partial_update"}:
            return DonorEligibilityUpdateSerializer
        return DonorSerializer

    def get_queryset(self):
        u = self.request.user
        qs = Donor.objects.select_related("user").order_by("-created_at")
        if not is_allowed(role_of(u), "donor.view_any"):
            qs = qs.filter(user_id=u.id)

        p = self.request.query_params
        if p.get("blood_type"):
            qs = qs.filter(blood_type=p["blood_type"].upper())
        if (p.get("eligible_only") or "").lower() in ("1", "true", "yes"):
            qs = qs.filter(Q(eligible_to_donate_since__isnull=True) | Q(eligible_to_donate_since__lte=timezone.now()))
        return qs

    def update(self, request, *args, **kwargs):
        super().update(request, *args, **kwargs)
        donor = self.get_object()
        logger.info(f"Donor {donor.pk} eligibility updated by {request.user.email}")
        return Response(DonorDetailSerializer(donor).data)

    @action(detail=False, methods=["get"], url_path=r"by-user/(?P<user_id>\d+)")
    def by_user(self, request, user_id=None):
        """Donor profile for a user id: the user themself or any staff role."""
        u = request.user
        if str(u.id) != str(user_id) and not is_allowed(role_of(u), "donor.view_any"):
            raise PermissionDenied("You can only view your own donor profile.")
        donor = get_object_or_404(Donor.objects.select_related("user"), user_id=user_id)
        return Response(DonorDetailSerializer(donor).data)


class DonorScreeningViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
):
    serializer_class = DonorScreeningSerializer
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "list": "donor.screen",
        "retrieve": "donor.screen",
        "create": "donor.screen",
    }

    def get_queryset(self):
        qs = DonorScreening.objects.select_related("donor", "screened_by").order_by("-screened_at")
        p = self.request.query_params
        donor_id = query_int(p, "donor")
        if donor_id is not None:
            qs = qs.filter(donor_id=donor_id)
        if p.get("status"):
            qs = qs.filter(status=p["status"].upper())
        return qs

    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        donor = get_object_or_404(Donor, pk=s.validated_data.pop("donor_id"))
        with transaction.atomic():
            screening = s.save(donor=donor, screened_by=request.user)
            apply_screening(screening)
            screening.save(update_fields=["deferred_until"])
        return Response(self.get_serializer(screening).data, status=status.HTTP_201_CREATED)
