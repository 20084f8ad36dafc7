from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.enums import UserRole
from accounts.permissions import HasActionCapability, role_of
from core.params import query_datetime, query_int
from patients.models import Patient
from .models import Transfusion
from .serializers import (
    TransfusionSerializer,
    TransfusionCreateSerializer,
    TransfusionUpdateSerializer,
)
from .services.fulfillment import record_transfusion


class TransfusionViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
):
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "create": "transfusion.create",
        "update": "transfusion.update",
        "partial_update": "transfusion.update",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return TransfusionCreateSerializer
        if self.action in {"update", "partial_update"}:
            return TransfusionUpdateSerializer
        return TransfusionSerializer

    def get_queryset(self):
        u = self.request.user
        q = (
            Transfusion.objects
            .select_related("patient", "medical_officer__user")
            .prefetch_related("blood_units")
            .order_by("-transfusion_date")
        )
        if self.action == "list" and role_of(u) == UserRole.MEDICAL_OFFICER:
            q = q.filter(medical_officer__user_id=u.id)

        p = self.request.query_params
        patient_id = query_int(p, "patient")
        if patient_id is not None:
            q = q.filter(patient_id=patient_id)
        request_id = query_int(p, "request")
        if request_id is not None:
            q = q.filter(request_id=request_id)
        start = query_datetime(p, "start_date")
        end = query_datetime(p, "end_date")
        if start:
            q = q.filter(transfusion_date__gte=start)
        if end:
            q = q.filter(transfusion_date__lte=end)
        return q

    def get_object(self):
        obj = super().get_object()
        u = self.request.user
        if role_of(u) == UserRole.MEDICAL_OFFICER and obj.medical_officer.user_id != u.id:
            raise PermissionDenied("You can only access transfusions you performed.")
        return obj

    def create(self, request, *args, **kwargs):
        officer = getattr(request.user, "medical_officer", None)
        if officer is None:
            raise NotFound("Medical officer profile not found")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        patient = get_object_or_404(Patient, pk=data["patient_id"])

        transfusion = record_transfusion(
            medical_officer=officer,
            patient=patient,
            request_id=data["request_id"],
            unit_ids=data["blood_unit_ids"],
            transfusion_date=data.get("transfusion_date"),
            notes=data.get("notes", ""),
        )
        return Response(TransfusionSerializer(transfusion).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        super().update(request, *args, **kwargs)
        return Response(TransfusionSerializer(self.get_object()).data)
