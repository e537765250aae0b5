"""Password hashing with a configurable bcrypt cost."""

from django.conf import settings
from django.contrib.auth.hashers import BCryptSHA256PasswordHasher


class CampusBCryptPasswordHasher(BCryptSHA256PasswordHasher):
    """
    bcrypt-sha256 with the work factor taken from ``BCRYPT_ROUNDS``.

    Keeps the ``bcrypt_sha256`` algorithm name, so hashes stay verifiable by
    Django's stock hasher and get upgraded when the round count changes.
    """

    @property
    def rounds(self) -> int:
        return settings.BCRYPT_ROUNDS
