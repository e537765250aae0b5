"""Serializers for image endpoints."""

from rest_framework import serializers

from core.storage import LOCATION_PERMANENT

from .exceptions import InvalidFilenameError
from .locations import parse_image_url


class ImageUploadSerializer(serializers.Serializer):
    """Multipart upload with a single ``image`` field (schema only)."""

    image = serializers.FileField()


class UploadedImageSerializer(serializers.Serializer):
    filename = serializers.CharField()
    url = serializers.CharField()
    size = serializers.IntegerField()
    mimeType = serializers.CharField()


class PromoteSerializer(serializers.Serializer):
    url = serializers.CharField(max_length=500)


class DeleteImageSerializer(serializers.Serializer):
    """Accepts a bare filename or the URL of a permanent image."""

    filename = serializers.CharField(required=False, allow_blank=True)
    imageUrl = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        filename = attrs.get("filename")
        if not filename and attrs.get("imageUrl"):
            parsed = parse_image_url(attrs["imageUrl"])
            if parsed is None or parsed[0] != LOCATION_PERMANENT:
                raise InvalidFilenameError("imageUrl must point to a permanent image")
            filename = parsed[1]
        if not filename:
            raise serializers.ValidationError({"filename": ["This field is required."]})
        return {"filename": filename}


class BulkDeleteSerializer(serializers.Serializer):
    filenames = serializers.ListField(
        child=serializers.CharField(allow_blank=True), allow_empty=False
    )


class ImageListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=20)
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
    minSize = serializers.IntegerField(min_value=0, required=False)
    maxSize = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        start, end = attrs.get("startDate"), attrs.get("endDate")
        if start and end and start > end:
            raise serializers.ValidationError({"startDate": ["startDate must not be after endDate."]})
        low, high = attrs.get("minSize"), attrs.get("maxSize")
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError({"minSize": ["minSize must not exceed maxSize."]})
        return attrs
