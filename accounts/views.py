import logging

from django.db.models.deletion import ProtectedError
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action, api_view, authentication_classes, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import BusinessRuleViolation
from .enums import UserRole
from .models import User
from .permissions import HasActionCapability, role_of
from .serializers import (
    RegisterSerializer,
    LoginSerializer,
    UserSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
    ChangePasswordSerializer,
)

logger = logging.getLogger(__name__)

def _jwt_pair_for(user: User) -> dict:
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}

@api_view(["GET"])
@authentication_classes([JWTAuthentication])
@permission_classes([permissions.IsAuthenticated])
def me(request):
    """Current user with their role profile."""
    return Response(UserSerializer(request.user).data)

@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def register(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = s.save()
    logger.info(f"Donor self-registered: {user.email}")
    return Response(
        {"user": UserSerializer(user).data, "tokens": _jwt_pair_for(user)},
        status=status.HTTP_201_CREATED,
    )

@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def login_password(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = s.validated_data["user"]
    return Response({"tokens": _jwt_pair_for(user), "user": {"email": user.email, "role": user.role}})


class UserViewSet(
    viewsets.GenericViewSet,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
):
    """
    /api/users/
    - ADMIN: list, create (any role + profile), delete
    - self or ADMIN: retrieve, update, profile
    - self only: change-password
    """
    queryset = User.objects.select_related("donor", "medical_officer", "technician").order_by("-date_joined")
    authentication_classes = [JWTAuthentication]
    permission_classes = [HasActionCapability]
    capability_map = {
        "list": "user.list",
        "create": "user.create",
        "destroy": "user.delete",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return UserCreateSerializer
        if self.action in {"update", "partial_update"}:
            return UserUpdateSerializer
        return UserSerializer

    def get_object(self):
        obj = super().get_object()
        u = self.request.user
        if obj.pk != u.pk and role_of(u) != UserRole.ADMIN:
            raise PermissionDenied("You can only access your own account.")
        return obj

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == "list":
            role = self.request.query_params.get("role")
            if role:
                qs = qs.filter(role=role.upper())
        return qs

    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        user = s.save()
        logger.info(f"User {user.email} ({user.role}) created by {request.user.email}")
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        s = self.get_serializer(instance, data=request.data, partial=partial)
        s.is_valid(raise_exception=True)
        user = s.save()
        return Response(UserSerializer(user).data)

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise BusinessRuleViolation("You cannot delete your own account")
        try:
            instance.delete()
        except ProtectedError:
            raise BusinessRuleViolation("User has blood bank records and cannot be deleted; deactivate instead")
        logger.info(f"User {instance.email} deleted by {self.request.user.email}")

    @action(detail=True, methods=["get", "put", "patch"])
    def profile(self, request, pk=None):
        user = self.get_object()
        if request.method == "GET":
            return Response(UserSerializer(user).data)
        s = UserUpdateSerializer(user, data=request.data, partial=request.method == "PATCH")
        s.is_valid(raise_exception=True)
        return Response(UserSerializer(s.save()).data)

    @action(detail=True, methods=["post"], url_path="change-password")
    def change_password(self, request, pk=None):
        user = super().get_object()
        if user.pk != request.user.pk:
            raise PermissionDenied("You can only change your own password.")
        s = ChangePasswordSerializer(data=request.data, context={"request": request})
        s.is_valid(raise_exception=True)
        s.save()
        return Response({"detail": "Password changed successfully."})
