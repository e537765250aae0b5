"""
Production settings for Campus CMS Server.

Runs behind a TLS-terminating reverse proxy with PostgreSQL.
"""

import os
from .base import *

# =============================================================================
# SENTRY
# =============================================================================
# Error reporting is enabled only when SENTRY_DSN is set.

if SENTRY_DSN:
    import logging
    import re

    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration

    _JWT_PATTERN = re.compile(r'[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}')
    _SENSITIVE_FIELDS = ('password', 'token', 'refreshToken', 'secret', 'recaptchaToken', 'email', 'phone')

    def filter_sensitive_data(event, hint):
        """
        Strip credentials and student contact details from Sentry events.

        Redacts the Authorization header, sensitive request body fields and
        anything shaped like a JWT in exception messages.
        """
        request = event.get('request', {})
        headers = request.get('headers', {})
        if 'Authorization' in headers:
            headers['Authorization'] = '[Filtered]'

        data = request.get('data')
        if isinstance(data, dict):
            for field in _SENSITIVE_FIELDS:
                if field in data:
                    data[field] = '[Filtered]'

        for exc in event.get('exception', {}).get('values', []):
            if 'value' in exc:
                exc['value'] = _JWT_PATTERN.sub('[REDACTED_TOKEN]', exc['value'])

        return event

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[
            DjangoIntegration(
                transaction_style='url',
                middleware_spans=True,
                signals_spans=False,
                cache_spans=True,
                http_methods_to_capture=("GET", "POST", "PUT", "PATCH", "DELETE"),
            ),
            # Info and above as breadcrumbs, errors as events
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=config('SENTRY_TRACES_SAMPLE_RATE', default=0.1, cast=float),
        profiles_sample_rate=config('SENTRY_PROFILES_SAMPLE_RATE', default=0.0, cast=float),
        environment=config('ENVIRONMENT', default='production'),
        release=config('GIT_COMMIT', default='unknown'),
        # Registration records carry names, emails and phone numbers
        send_default_pii=False,
        before_send=filter_sensitive_data,
        max_breadcrumbs=50,
        attach_stacktrace=True,
    )

    logging.getLogger(__name__).info(
        f"Sentry initialized for environment '{config('ENVIRONMENT', default='production')}'"
    )

ENVIRONMENT = config('ENVIRONMENT', default='production')
IS_PRODUCTION = True

DEBUG = config('DEBUG', default=False, cast=bool)

# No default; startup fails if unset
ALLOWED_HOSTS = config('ALLOWED_HOSTS', cast=Csv())

# PostgreSQL when POSTGRES_HOST is set, otherwise the SQLite file from base.py
if os.getenv('POSTGRES_HOST'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.getenv('POSTGRES_DB', 'campus_cms'),
            'USER': os.getenv('POSTGRES_USER', 'campus_cms'),
            'PASSWORD': os.getenv('POSTGRES_PASSWORD'),
            'HOST': os.getenv('POSTGRES_HOST'),
            'PORT': os.getenv('POSTGRES_PORT', '5432'),
            'CONN_MAX_AGE': 600,
        }
    }

# WhiteNoise serves the admin and Swagger UI static files
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    *MIDDLEWARE[1:],
]

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage'},
}

# =============================================================================
# SECURITY
# =============================================================================
# The proxy terminates TLS and redirects HTTP, so Django does not by default.

SECURE_SSL_REDIRECT = config('SECURE_SSL_REDIRECT', default=False, cast=bool)
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

# Start low (300) when first enabling HTTPS on a new domain
SECURE_HSTS_SECONDS = config('SECURE_HSTS_SECONDS', default=31536000, cast=int)
SECURE_HSTS_INCLUDE_SUBDOMAINS = config('SECURE_HSTS_INCLUDE_SUBDOMAINS', default=True, cast=bool)
SECURE_HSTS_PRELOAD = config('SECURE_HSTS_PRELOAD', default=False, cast=bool)

SESSION_COOKIE_SECURE = config('SESSION_COOKIE_SECURE', default=True, cast=bool)
CSRF_COOKIE_SECURE = config('CSRF_COOKIE_SECURE', default=True, cast=bool)

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Console only; the process supervisor collects stdout
LOGGING['loggers']['django']['level'] = config('DJANGO_LOG_LEVEL', default='INFO')
LOGGING['loggers']['django.security'] = {
    'handlers': ['console'],
    'level': 'WARNING',
    'propagate': False,
}
