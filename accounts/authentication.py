"""JWT bearer authentication for Campus CMS."""

from typing import TYPE_CHECKING, Any

from django.contrib.auth import get_user_model
from drf_spectacular.extensions import OpenApiAuthenticationExtension
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.request import Request

from core.exceptions import AuthenticationError

from .tokens import decode_token

if TYPE_CHECKING:
    from accounts.models import User
else:
    User = get_user_model()


class JWTAuthentication(BaseAuthentication):
    """
    Access-token authentication using Bearer token.

    Client should authenticate by passing the token in the Authorization header:
        Authorization: Bearer <access_token>
    """

    keyword = "Bearer"

    def authenticate(self, request: Request) -> tuple["User", dict] | None:
        """
        Authenticate using a JWT in the Authorization header.

        Returns:
            Tuple of (user, token payload) if authentication succeeds
            None if Authorization header is not present (allows other authenticators)

        Raises:
            AuthenticationFailed: If the token is invalid or the user is gone
        """
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith(f"{self.keyword} "):
            return None

        token = auth_header[len(self.keyword) + 1 :].strip()

        try:
            payload = decode_token(token)
        except AuthenticationError as e:
            raise AuthenticationFailed(e.message)

        try:
            user = User.objects.get(pk=payload["sub"], is_active=True)
        except (User.DoesNotExist, KeyError, ValueError):
            raise AuthenticationFailed("User not found or inactive")

        return (user, payload)

    def authenticate_header(self, request: Request) -> str:
        return self.keyword


class JWTAuthenticationScheme(OpenApiAuthenticationExtension):
    """OpenAPI schema extension for JWT authentication."""

    target_class = "accounts.authentication.JWTAuthentication"
    name = "JWTAuth"

    def get_security_definition(self, auto_schema: Any) -> dict[str, str]:
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Access token from /api/users/auth/login/. Format: `Authorization: Bearer <token>`",
        }
