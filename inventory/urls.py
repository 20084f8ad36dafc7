from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import BloodUnitViewSet

router = DefaultRouter()
router.register("", BloodUnitViewSet, basename="blood-unit")

urlpatterns = [
    path("", include(router.urls)),
]
