"""API views for student registration."""

import logging

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import IsAdminRole
from core.exceptions import NotFoundError, ValidationError
from core.pagination import CampusPagination
from core.throttling import DdosGuardThrottle, StudentRegistrationThrottle
from core.utils import get_client_ip
from core.views import CampusBaseAPIView, api_response

from .models import StudentRegistration
from .recaptcha import verify_recaptcha
from .serializers import (
    RegistrationStatusSerializer,
    StudentRegistrationCreateSerializer,
    StudentRegistrationSerializer,
)

logger = logging.getLogger(__name__)


class StudentRegisterView(CampusBaseAPIView):
    """
    Public enrollment inquiry form.

    Guarded by the DDoS guard first and the per-IP registration rate second;
    the first one to refuse ends the request with 429.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [DdosGuardThrottle, StudentRegistrationThrottle]

    @extend_schema(
        summary="Submit student registration",
        request=StudentRegistrationCreateSerializer,
        responses={
            201: OpenApiResponse(description="Registration stored"),
            400: OpenApiResponse(description="Validation or reCAPTCHA failure"),
            429: OpenApiResponse(description="Rate limited or temporarily blocked"),
        },
        tags=["Students"],
    )
    def post(self, request: Request) -> Response:
        serializer = StudentRegistrationCreateSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError("Validation failed", data={"errors": serializer.errors})

        ip = get_client_ip(request)
        verify_recaptcha(serializer.validated_data.get("recaptchaToken"), ip)

        registration = serializer.save(
            ip_address=None if ip == "unknown" else ip,
            user_agent=request.META.get("HTTP_USER_AGENT", "")[:500],
        )
        logger.info(f"Student registration {registration.id} from {ip}")

        return api_response(
            "Registration submitted", {"id": str(registration.id)}, status.HTTP_201_CREATED
        )


class RegistrationListView(CampusBaseAPIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="List student registrations",
        parameters=[
            OpenApiParameter("status", str, enum=[c[0] for c in StudentRegistration.STATUS_CHOICES]),
            OpenApiParameter("search", str, description="Matches name, email, phone or major"),
            OpenApiParameter("page", int),
            OpenApiParameter("limit", int),
        ],
        tags=["Students"],
    )
    def get(self, request: Request) -> Response:
        queryset = StudentRegistration.objects.all()

        registration_status = request.query_params.get("status")
        if registration_status:
            queryset = queryset.filter(status=registration_status)

        search = request.query_params.get("search", "").strip()
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(email__icontains=search)
                | Q(phone__icontains=search)
                | Q(major__icontains=search)
            )

        paginator = CampusPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(
            StudentRegistrationSerializer(page, many=True).data
        )


class RegistrationStatusView(CampusBaseAPIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="Update registration status",
        request=RegistrationStatusSerializer,
        responses={200: StudentRegistrationSerializer},
        tags=["Students"],
    )
    def patch(self, request: Request, registration_id) -> Response:
        registration = StudentRegistration.objects.filter(pk=registration_id).first()
        if registration is None:
            raise NotFoundError("Registration not found")

        serializer = RegistrationStatusSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError("Validation failed", data={"errors": serializer.errors})

        previous = registration.status
        registration.status = serializer.validated_data["status"]
        registration.save(update_fields=["status", "updated_at"])
        logger.info(
            f"Registration {registration.id} status {previous} -> {registration.status} "
            f"by {request.user.username}"
        )

        return api_response(
            "Status updated", StudentRegistrationSerializer(registration).data
        )
