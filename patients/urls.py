from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PatientViewSet, MedicalRecordViewSet

router = DefaultRouter()

router.register("medical-records", MedicalRecordViewSet, basename="medical-record")
router.register("", PatientViewSet, basename="patient")

urlpatterns = [
    path("", include(router.urls)),
]
