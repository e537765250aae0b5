"""
Test settings for Campus CMS Server.

Used by pytest (see pyproject.toml) and ``manage.py test --settings``.
"""

import tempfile

from .base import *

DEBUG = False
ENVIRONMENT = 'test'
IS_PRODUCTION = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'campus-cms-tests',
    }
}

# Hashing dominates test time otherwise
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

RECAPTCHA_ENABLED = False
RECAPTCHA_SECRET_KEY = ''
SENTRY_DSN = ''

# Tests override this per class; the default keeps stray writes out of the repo
CAMPUS_MEDIA_ROOT = Path(tempfile.gettempdir()) / 'campus_cms_test_media'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}
