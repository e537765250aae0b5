"""Google reCAPTCHA verification for the public registration form."""

import logging

import requests
from django.conf import settings

from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _reject(message: str):
    raise ValidationError(
        "reCAPTCHA verification failed",
        data={"errors": {"recaptcha": [message]}},
    )


def verify_recaptcha(token: str | None, remote_ip: str | None = None) -> None:
    """
    Check a reCAPTCHA token against Google's siteverify endpoint.

    Does nothing while RECAPTCHA_ENABLED is off. Network failures and
    timeouts count as a failed verification.

    Raises:
        ValidationError: Token missing, rejected, or unverifiable
    """
    if not settings.RECAPTCHA_ENABLED:
        return

    if not settings.RECAPTCHA_SECRET_KEY:
        logger.error("RECAPTCHA_ENABLED is set but RECAPTCHA_SECRET_KEY is empty")
        _reject("reCAPTCHA is not configured")

    if not token:
        _reject("reCAPTCHA token is required")

    payload = {"secret": settings.RECAPTCHA_SECRET_KEY, "response": token}
    if remote_ip and remote_ip != "unknown":
        payload["remoteip"] = remote_ip

    try:
        response = requests.post(
            settings.RECAPTCHA_VERIFY_URL,
            data=payload,
            timeout=settings.RECAPTCHA_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        result = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"reCAPTCHA verification unavailable: {e}")
        _reject("Could not verify reCAPTCHA, please try again")

    if not isinstance(result, dict):
        logger.warning(f"reCAPTCHA returned an unexpected reply: {result!r}")
        _reject("Could not verify reCAPTCHA, please try again")

    if not result.get("success"):
        logger.info(f"reCAPTCHA rejected for {remote_ip}: {result.get('error-codes', [])}")
        _reject("reCAPTCHA verification failed")
