"""Image upload, lifecycle and serving API views."""

import logging

from django.http import FileResponse
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import IsAdminRole, IsFacultyOrAdmin
from core.exceptions import ValidationError
from core.pagination import pagination_meta
from core.storage import LOCATION_PERMANENT, LOCATION_TEMPORARY, get_media_storage
from core.throttling import ImageUploadThrottle
from core.views import CampusBaseAPIView, api_response

from .exceptions import ImageNotFoundError, InvalidFilenameError
from .optimizer import ImageOptimizer
from .serializers import (
    BulkDeleteSerializer,
    DeleteImageSerializer,
    ImageListQuerySerializer,
    ImageUploadSerializer,
    PromoteSerializer,
    UploadedImageSerializer,
)
from .signals import image_action_performed
from .staging import UploadStager
from .store import AssetStore, ImageListFilters

logger = logging.getLogger(__name__)


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise ValidationError("Validation failed", data={"errors": serializer.errors})
    return serializer.validated_data


class ImageUploadView(CampusBaseAPIView):
    """Upload an image, optimize it, and store it permanently."""

    permission_classes = [IsFacultyOrAdmin]
    throttle_classes = [ImageUploadThrottle]
    parser_classes = [MultiPartParser]
    location = LOCATION_PERMANENT
    action = "upload"

    @extend_schema(
        summary="Upload image",
        description="JPEG, PNG, GIF or WebP up to 10 MB. Stored as JPEG, at most 1200px wide.",
        request={"multipart/form-data": ImageUploadSerializer},
        responses={
            201: UploadedImageSerializer,
            400: OpenApiResponse(description="Missing, unsupported or oversized file"),
            429: OpenApiResponse(description="Upload rate limit exceeded"),
            500: OpenApiResponse(description="Could not process the image"),
        },
        tags=["Images"],
    )
    def post(self, request: Request) -> Response:
        staged = UploadStager().stage(request.FILES.get("image"))
        optimized = ImageOptimizer().optimize(staged, self.location)

        image_action_performed.send(
            sender=self.__class__,
            action=self.action,
            filename=optimized.filename,
            location=self.location,
            actor=request.user,
            success=True,
            size=optimized.size,
        )

        return api_response(
            "Image uploaded and optimized successfully",
            {
                "filename": optimized.filename,
                "url": AssetStore.public_url(optimized.filename, self.location),
                "size": optimized.size,
                "mimeType": optimized.mime_type,
            },
            status.HTTP_201_CREATED,
        )


class ImageTempUploadView(ImageUploadView):
    """Upload an image into temp_images/ until the article using it is saved."""

    location = LOCATION_TEMPORARY
    action = "upload_temp"

    @extend_schema(
        summary="Upload temporary image",
        request={"multipart/form-data": ImageUploadSerializer},
        responses={201: UploadedImageSerializer},
        tags=["Images"],
    )
    def post(self, request: Request) -> Response:
        return super().post(request)


class ImagePromoteView(CampusBaseAPIView):
    """Move a temporary image to permanent storage."""

    permission_classes = [IsFacultyOrAdmin]

    @extend_schema(
        summary="Promote temporary image",
        request=PromoteSerializer,
        responses={200: OpenApiResponse(description="Permanent URL"), 404: OpenApiResponse(description="Image not found")},
        tags=["Images"],
    )
    def post(self, request: Request) -> Response:
        data = _validated(PromoteSerializer, request.data)
        url = AssetStore().promote(data["url"], actor=request.user)
        return api_response("Image promoted", {"url": url})


class ImageDeleteView(CampusBaseAPIView):
    """Delete a permanent image that no article uses."""

    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="Delete image",
        request=DeleteImageSerializer,
        responses={
            200: OpenApiResponse(description="Image deleted"),
            400: OpenApiResponse(description="Invalid filename"),
            404: OpenApiResponse(description="Image not found"),
            409: OpenApiResponse(description="Image in use by articles"),
        },
        tags=["Images"],
    )
    def delete(self, request: Request) -> Response:
        data = _validated(DeleteImageSerializer, request.data)
        AssetStore().delete(data["filename"], actor=request.user)
        return api_response("Image deleted successfully", {"filename": data["filename"]})


class ImageBulkDeleteView(CampusBaseAPIView):
    """Delete many images; each name succeeds or fails on its own."""

    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="Bulk delete images",
        request=BulkDeleteSerializer,
        responses={200: OpenApiResponse(description="{deleted: [...], failed: {name: reason}}")},
        tags=["Images"],
    )
    def delete(self, request: Request) -> Response:
        data = _validated(BulkDeleteSerializer, request.data)
        result = AssetStore().bulk_delete(data["filenames"], actor=request.user)
        return api_response(
            f"{len(result.deleted)} deleted, {len(result.failed)} failed",
            {"deleted": result.deleted, "failed": result.failed},
        )


class ImageForceDeleteView(CampusBaseAPIView):
    """Delete an image even if articles still reference it."""

    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="Force delete image",
        description="Skips the article reference check. Every use is logged.",
        request=DeleteImageSerializer,
        tags=["Images"],
    )
    def delete(self, request: Request) -> Response:
        data = _validated(DeleteImageSerializer, request.data)
        references = AssetStore().force_delete(data["filename"], actor=request.user)
        return api_response(
            "Image force deleted",
            {"filename": data["filename"], "danglingReferences": references},
        )


class ImageListView(CampusBaseAPIView):
    """List permanent images, newest first."""

    permission_classes = [IsFacultyOrAdmin]

    @extend_schema(
        summary="List images",
        parameters=[
            OpenApiParameter("page", int),
            OpenApiParameter("limit", int),
            OpenApiParameter("startDate", str, description="YYYY-MM-DD, inclusive"),
            OpenApiParameter("endDate", str, description="YYYY-MM-DD, inclusive"),
            OpenApiParameter("minSize", int, description="Bytes, inclusive"),
            OpenApiParameter("maxSize", int, description="Bytes, inclusive"),
        ],
        tags=["Images"],
    )
    def get(self, request: Request) -> Response:
        query = _validated(ImageListQuerySerializer, request.query_params)
        store = AssetStore()
        page = store.list(
            ImageListFilters(
                page=query["page"],
                limit=query["limit"],
                start_date=query.get("startDate"),
                end_date=query.get("endDate"),
                min_size=query.get("minSize"),
                max_size=query.get("maxSize"),
            )
        )

        items = [
            {
                "filename": info.name,
                "url": store.public_url(info.name),
                "size": info.size,
                "createdAt": info.modified_at.isoformat(),
            }
            for info in page.items
        ]
        return api_response(
            "OK",
            {"items": items, "pagination": pagination_meta(page.page, page.limit, page.total)},
        )


class ImageServeView(CampusBaseAPIView):
    """Serve a stored image. Public."""

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Get image file",
        responses={(200, "image/jpeg"): OpenApiResponse(description="Image bytes"), 404: OpenApiResponse(description="Image not found")},
        tags=["Images"],
    )
    def get(self, request: Request, location: str, filename: str):
        filename = AssetStore.validate_name(filename)
        storage = get_media_storage()
        try:
            handle = storage.open(location, filename)
        except FileNotFoundError:
            raise ImageNotFoundError()
        except ValueError:
            raise InvalidFilenameError()

        response = FileResponse(handle, content_type="image/jpeg")
        response["Cache-Control"] = "public, max-age=31536000, immutable"
        return response
