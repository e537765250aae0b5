"""Serializers for student registration."""

import re

from django.core.validators import URLValidator
from rest_framework import serializers

from .models import StudentRegistration

PHONE_PATTERN = re.compile(r"^(?:\+84|0)\d{9,10}$")


class StudentRegistrationCreateSerializer(serializers.Serializer):
    """Public registration form. All text fields are trimmed."""

    name = serializers.CharField(max_length=100, trim_whitespace=True)
    email = serializers.EmailField(max_length=254)
    phone = serializers.CharField(max_length=20, trim_whitespace=True)
    major = serializers.CharField(max_length=150, trim_whitespace=True)
    facebook = serializers.URLField(
        max_length=500, required=False, allow_blank=True,
        validators=[URLValidator(schemes=["http", "https"])],
    )
    recaptchaToken = serializers.CharField(required=False, allow_blank=True)

    def validate_name(self, value):
        if len(value) < 2:
            raise serializers.ValidationError("Name must be at least 2 characters.")
        return value

    def validate_email(self, value):
        return value.lower()

    def validate_phone(self, value):
        value = re.sub(r"[\s.-]", "", value)
        if not PHONE_PATTERN.match(value):
            raise serializers.ValidationError(
                "Phone must start with 0 or +84 followed by 9-10 digits."
            )
        return value

    def create(self, validated_data):
        validated_data.pop("recaptchaToken", None)
        return StudentRegistration.objects.create(**validated_data)


class StudentRegistrationSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    ipAddress = serializers.IPAddressField(source="ip_address", read_only=True)
    userAgent = serializers.CharField(source="user_agent", read_only=True)

    class Meta:
        model = StudentRegistration
        fields = [
            "id", "name", "email", "phone", "major", "facebook", "status",
            "ipAddress", "userAgent", "createdAt", "updatedAt",
        ]
        read_only_fields = fields


class RegistrationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=StudentRegistration.STATUS_CHOICES)
