from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import DonorViewSet, DonorScreeningViewSet

router = DefaultRouter()
router.register("screenings", DonorScreeningViewSet, basename="donor-screening")
router.register("", DonorViewSet, basename="donor")

urlpatterns = [
    path("", include(router.urls)),
]
