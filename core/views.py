"""Base views for the Campus CMS API."""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView


def api_response(message: str, data=None, status_code: int = status.HTTP_200_OK) -> Response:
    """Wrap a payload in the success envelope."""
    return Response(
        {"status": "success", "message": message, "data": data}, status=status_code
    )


class CampusBaseAPIView(APIView):
    """
    Base API view for all Campus CMS endpoints.

    Provides:
    - Authentication required by default
    - Common serializer context
    - Ordered throttling: the first throttle that rejects ends the request
    """

    permission_classes = [IsAuthenticated]

    def get_serializer_context(self):
        """Return context dict for serializers."""
        return {"request": self.request}

    def check_throttles(self, request):
        for throttle in self.get_throttles():
            if throttle.allow_request(request, self):
                continue
            rejection = getattr(throttle, "rejection", None)
            if rejection is not None:
                raise rejection()
            self.throttled(request, throttle.wait())
