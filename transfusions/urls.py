from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import TransfusionViewSet

router = DefaultRouter()
router.register("", TransfusionViewSet, basename="transfusion")

urlpatterns = [
    path("", include(router.urls)),
]
