"""Serializers for accounts app."""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Public view of a user."""

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'phone',
            'role', 'is_active', 'date_joined', 'last_login',
        ]
        read_only_fields = fields


class RegistrationSerializer(serializers.Serializer):
    """Serializer for self-service registration. New accounts are students."""

    username = serializers.CharField(min_length=3, max_length=30)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6, style={'input_type': 'password'})
    first_name = serializers.CharField(max_length=50)
    last_name = serializers.CharField(max_length=50)
    phone = serializers.RegexField(r'^[0-9]{10,11}$', required=False, allow_blank=True)

    def validate_password(self, value):
        """Validate password using Django's validators."""
        validate_password(value)
        return value

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username already exists.")
        return value

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already exists.")
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(
            password=password, role=User.ROLE_STUDENT, **validated_data
        )


class LoginSerializer(serializers.Serializer):
    """Username or email plus password."""

    login = serializers.CharField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


class RefreshSerializer(serializers.Serializer):
    refreshToken = serializers.CharField()


class AdminUserUpdateSerializer(serializers.ModelSerializer):
    """Fields an admin may change on another user."""

    class Meta:
        model = User
        fields = ['role', 'is_active', 'first_name', 'last_name', 'phone']
