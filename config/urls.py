from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.routers import DefaultRouter

from accounts.views import UserViewSet

router = DefaultRouter()
router.register("users", UserViewSet, basename="user")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/accounts/", include("accounts.urls")),
    path("api/", include(router.urls)),
    path("api/donors/", include("donors.urls")),
    path("api/donations/", include("donations.urls")),
    path("api/blood-units/", include("inventory.urls")),
    path("api/blood-requests/", include("blood_requests.urls")),
    path("api/transfusions/", include("transfusions.urls")),
    path("api/patients/", include("patients.urls")),
]
