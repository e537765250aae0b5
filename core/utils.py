"""Core utility functions for Campus CMS."""

import ipaddress
import os
import re

from rest_framework.throttling import BaseThrottle

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


class PathValidationError(Exception):
    """Raised when a filename contains invalid characters or traversal attempts."""

    pass


def sanitize_filename(name: str) -> str:
    """
    Reduce a client-supplied filename to a safe basename.

    Takes the last path component (either separator) and replaces every
    character outside ``[A-Za-z0-9._-]`` with an underscore.
    """
    base = os.path.basename(name.replace("\\", "/"))
    return _UNSAFE_FILENAME_CHARS.sub("_", base)


def validate_filename(name: str) -> str:
    """
    Validate a filename used to address a stored image.

    The name must survive sanitization unchanged; anything else points at a
    traversal attempt or a name we never generated.

    Raises:
        PathValidationError: For invalid filenames
    """
    if not name:
        raise PathValidationError("Filename cannot be empty")

    if name in (".", ".."):
        raise PathValidationError("Invalid filename")

    if sanitize_filename(name) != name:
        raise PathValidationError("Filename contains invalid characters")

    return name


def normalize_client_ip(raw: str | None) -> str:
    """
    Normalize an IP address string for use as a throttle key.

    IPv4-mapped IPv6 addresses (``::ffff:10.0.0.1``) collapse to their IPv4
    form so one client cannot hold two buckets. Unparseable values are
    returned stripped.
    """
    if not raw:
        return "unknown"
    value = raw.strip()
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        return value
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        return str(address.ipv4_mapped)
    return str(address)


def get_client_ip(request) -> str:
    """
    Extract the normalized client IP from a request.

    Honors ``X-Forwarded-For`` only as far as DRF's ``NUM_PROXIES`` setting
    allows, so a client cannot spoof its way into a fresh bucket.
    """
    return normalize_client_ip(BaseThrottle().get_ident(request))
