import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.enums import UserRole
from accounts.models import MedicalOfficer
from accounts.permissions import HasActionCapability, role_of
from core.exceptions import BusinessRuleViolation
from core.params import query_int
from .models import Patient, MedicalRecord
from .permissions import ensure_assigned
from .serializers import PatientSerializer, MedicalRecordSerializer

logger = logging.getLogger(__name__)


def _officer_or_404(officer_id):
    return get_object_or_404(MedicalOfficer, pk=officer_id)


class PatientViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
):
    serializer_class = PatientSerializer
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "list": "patient.view",
        "retrieve": "patient.view",
        "create": "patient.create",
        "update": "patient.update",
        "partial_update": "patient.update",
        "destroy": "patient.delete",
    }

    def get_queryset(self):
        u = self.request.user
        q = Patient.objects.select_related("medical_officer__user").order_by("last_name", "first_name")
        if self.action == "list" and role_of(u) == UserRole.MEDICAL_OFFICER:
            q = q.filter(medical_officer__user_id=u.id)

        p = self.request.query_params
        if p.get("blood_type"):
            q = q.filter(blood_type=p["blood_type"].upper())
        s = p.get("search")
        if s:
            q = q.filter(
                Q(first_name__icontains=s) | Q(last_name__icontains=s) | Q(hospital_id__icontains=s)
            )
        return q

    def get_object(self):
        obj = super().get_object()
        ensure_assigned(self.request.user, obj)
        return obj

    def perform_create(self, serializer):
        u = self.request.user
        officer_id = serializer.validated_data.pop("medical_officer_id", None)
        if role_of(u) == UserRole.MEDICAL_OFFICER:
            officer = getattr(u, "medical_officer", None)
            if officer is None:
                raise NotFound("Medical officer profile not found")
        else:
            officer = _officer_or_404(officer_id) if officer_id is not None else None
        patient = serializer.save(medical_officer=officer)
        logger.info(f"Patient {patient.hospital_id} registered by {u.email}")

    def perform_update(self, serializer):
        u = self.request.user
        if "medical_officer_id" not in serializer.validated_data:
            serializer.save()
            return
        officer_id = serializer.validated_data.pop("medical_officer_id")
        if officer_id == serializer.instance.medical_officer_id:
            serializer.save()
            return
        if role_of(u) != UserRole.ADMIN:
            raise PermissionDenied("Only an admin can reassign a patient's medical officer.")
        officer = _officer_or_404(officer_id) if officer_id is not None else None
        serializer.save(medical_officer=officer)
        logger.info(f"Patient {serializer.instance.hospital_id} reassigned to officer {officer_id} by {u.email}")

    def perform_destroy(self, instance):
        if instance.transfusions.exists():
            raise BusinessRuleViolation("Cannot delete patient with transfusion history")
        if instance.blood_requests.exists():
            raise BusinessRuleViolation("Cannot delete patient with blood requests")
        logger.info(f"Patient {instance.hospital_id} deleted by {self.request.user.email}")
        instance.delete()


class MedicalRecordViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
):
    serializer_class = MedicalRecordSerializer
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "list": "medical_record.manage",
        "retrieve": "medical_record.manage",
        "create": "medical_record.manage",
    }

    def get_queryset(self):
        u = self.request.user
        q = MedicalRecord.objects.select_related("patient", "medical_officer__user").order_by("-created_at")
        if role_of(u) == UserRole.MEDICAL_OFFICER:
            q = q.filter(patient__medical_officer__user_id=u.id)
        p = self.request.query_params
        patient_id = query_int(p, "patient")
        if patient_id is not None:
            q = q.filter(patient_id=patient_id)
        if p.get("record_type"):
            q = q.filter(record_type=p["record_type"].upper())
        return q

    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = get_object_or_404(Patient, pk=s.validated_data.pop("patient_id"))
        ensure_assigned(request.user, patient)

        if role_of(request.user) == UserRole.MEDICAL_OFFICER:
            officer = request.user.medical_officer
        else:
            officer = patient.medical_officer or MedicalOfficer.objects.order_by("id").first()
            if officer is None:
                raise BusinessRuleViolation("No medical officer available to attribute this record to")

        record = s.save(patient=patient, medical_officer=officer)
        return Response(self.get_serializer(record).data, status=status.HTTP_201_CREATED)
