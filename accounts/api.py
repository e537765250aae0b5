"""API views for users and authentication."""

import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.exceptions import AuthenticationError, NotFoundError, ValidationError
from core.pagination import CampusPagination
from core.throttling import LoginRateThrottle
from core.utils import get_client_ip
from core.views import CampusBaseAPIView, api_response

from .permissions import IsAdminRole
from .serializers import (
    AdminUserUpdateSerializer,
    LoginSerializer,
    RefreshSerializer,
    RegistrationSerializer,
    UserSerializer,
)
from .tokens import TOKEN_TYPE_REFRESH, decode_token, issue_tokens

logger = logging.getLogger(__name__)
User = get_user_model()


class RegistrationView(CampusBaseAPIView):
    """Create a student account and return tokens."""

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Register",
        request=RegistrationSerializer,
        responses={201: OpenApiResponse(description="Account created"), 400: OpenApiResponse(description="Validation failed")},
        tags=["Authentication"],
    )
    def post(self, request: Request) -> Response:
        serializer = RegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError("Validation failed", data={"errors": serializer.errors})

        user = serializer.save()
        logger.info(f"User registered: {user.username} from {get_client_ip(request)}")

        return api_response(
            "Account created",
            {"user": UserSerializer(user).data, "tokens": issue_tokens(user)},
            status.HTTP_201_CREATED,
        )


class LoginView(CampusBaseAPIView):
    """Exchange credentials for a token pair."""

    permission_classes = [AllowAny]
    throttle_classes = [LoginRateThrottle]

    @extend_schema(
        summary="Login",
        description="Accepts a username or email in `login`.",
        request=LoginSerializer,
        responses={200: OpenApiResponse(description="Token pair"), 401: OpenApiResponse(description="Invalid credentials")},
        tags=["Authentication"],
    )
    def post(self, request: Request) -> Response:
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError("Validation failed", data={"errors": serializer.errors})

        login = serializer.validated_data["login"].strip()
        password = serializer.validated_data["password"]

        user = User.objects.filter(
            Q(username__iexact=login) | Q(email__iexact=login)
        ).first()

        if user is None or not user.check_password(password):
            logger.warning(f"Failed login for '{login}' from {get_client_ip(request)}")
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])

        return api_response(
            "Login successful",
            {"user": UserSerializer(user).data, "tokens": issue_tokens(user)},
        )


class RefreshView(CampusBaseAPIView):
    """Issue a new token pair from a refresh token."""

    permission_classes = [AllowAny]

    @extend_schema(summary="Refresh tokens", request=RefreshSerializer, tags=["Authentication"])
    def post(self, request: Request) -> Response:
        serializer = RefreshSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError("Validation failed", data={"errors": serializer.errors})

        payload = decode_token(serializer.validated_data["refreshToken"], TOKEN_TYPE_REFRESH)
        user = User.objects.filter(pk=payload.get("sub"), is_active=True).first()
        if user is None:
            raise AuthenticationError("User not found or inactive")

        return api_response("Token refreshed", {"tokens": issue_tokens(user)})


class AuthMeView(CampusBaseAPIView):
    """Current user profile."""

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Current user", responses={200: UserSerializer}, tags=["Authentication"])
    def get(self, request: Request) -> Response:
        return api_response("OK", UserSerializer(request.user).data)


class AdminUserListView(CampusBaseAPIView):
    """List users (admin only)."""

    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="List users",
        parameters=[
            OpenApiParameter("role", str, description="Filter by role"),
            OpenApiParameter("search", str, description="Match username, email or name"),
            OpenApiParameter("page", int),
            OpenApiParameter("limit", int),
        ],
        tags=["Admin - Users"],
    )
    def get(self, request: Request) -> Response:
        queryset = User.objects.all().order_by("-date_joined")

        role = request.query_params.get("role")
        if role:
            queryset = queryset.filter(role=role)

        search = request.query_params.get("search", "").strip()
        if search:
            queryset = queryset.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )

        paginator = CampusPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(UserSerializer(page, many=True).data)


class AdminUserDetailView(CampusBaseAPIView):
    """Read or update one user (admin only)."""

    permission_classes = [IsAdminRole]

    def _get_user(self, user_id: int):
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFoundError("User not found")

    @extend_schema(summary="Get user", responses={200: UserSerializer}, tags=["Admin - Users"])
    def get(self, request: Request, user_id: int) -> Response:
        return api_response("OK", UserSerializer(self._get_user(user_id)).data)

    @extend_schema(summary="Update user", request=AdminUserUpdateSerializer, tags=["Admin - Users"])
    def patch(self, request: Request, user_id: int) -> Response:
        user = self._get_user(user_id)

        if user.pk == request.user.pk and (
            "role" in request.data or request.data.get("is_active") is False
        ):
            raise ValidationError("You cannot change your own role or deactivate yourself")

        serializer = AdminUserUpdateSerializer(user, data=request.data, partial=True)
        if not serializer.is_valid():
            raise ValidationError("Validation failed", data={"errors": serializer.errors})
        serializer.save()

        logger.info(f"Admin {request.user.username} updated user {user.username}: {serializer.validated_data}")
        return api_response("User updated", UserSerializer(user).data)
