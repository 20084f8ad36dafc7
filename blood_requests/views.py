import logging

from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.enums import UserRole
from accounts.permissions import HasActionCapability, role_of
from core.exceptions import BusinessRuleViolation
from patients.models import Patient
from .models import BloodRequest
from .serializers import (
    BloodRequestSerializer,
    BloodRequestCreateSerializer,
    BloodRequestUpdateSerializer,
)

logger = logging.getLogger(__name__)


class BloodRequestViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
):
    """
    Blood requests.
    - any authenticated user can raise one
    - medical officers only see the requests they raised
    - ADMIN/TECHNICIAN administer status; fulfilment itself happens via transfusions
    - ADMIN or the requester may delete a request that has no transfusions
    """
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "update": "blood_request.update",
        "partial_update": "blood_request.update",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return BloodRequestCreateSerializer
        if self.action in {"update", "partial_update"}:
            return BloodRequestUpdateSerializer
        return BloodRequestSerializer

    def get_queryset(self):
        u = self.request.user
        q = BloodRequest.objects.select_related("requester", "patient").order_by("status", "-created_at")
        if self.action == "list" and role_of(u) == UserRole.MEDICAL_OFFICER:
            q = q.filter(requester_id=u.id)

        p = self.request.query_params
        if p.get("status"):
            q = q.filter(status=p["status"].upper())
        if p.get("blood_type"):
            q = q.filter(blood_type=p["blood_type"].upper())
        if p.get("urgency"):
            q = q.filter(urgency=p["urgency"].upper())
        return q

    def get_object(self):
        obj = super().get_object()
        u = self.request.user
        if role_of(u) == UserRole.MEDICAL_OFFICER and obj.requester_id != u.id:
            raise PermissionDenied("You can only view blood requests you created.")
        return obj

    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient_id = s.validated_data.pop("patient_id", None)
        patient = get_object_or_404(Patient, pk=patient_id) if patient_id is not None else None

        blood_request = s.save(requester=request.user, patient=patient)
        logger.info(
            f"Blood request {blood_request.pk}: {blood_request.units}x {blood_request.blood_type} "
            f"({blood_request.urgency}) by {request.user.email}"
        )
        return Response(BloodRequestSerializer(blood_request).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        super().update(request, *args, **kwargs)
        return Response(BloodRequestSerializer(self.get_object()).data)

    def perform_destroy(self, instance):
        u = self.request.user
        if role_of(u) != UserRole.ADMIN and instance.requester_id != u.id:
            raise PermissionDenied("Only an admin or the requester can delete this blood request.")
        if instance.transfusions.exists():
            raise BusinessRuleViolation("Cannot delete blood request with associated transfusions")
        logger.info(f"Blood request {instance.pk} deleted by {u.email}")
        instance.delete()
