"""
Base settings for Campus CMS Server.

Shared by dev, production and test settings. Environment-specific values are
read with python-decouple so they can come from the environment or a .env file.
"""

from datetime import timedelta
from pathlib import Path

from decouple import Csv, config

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = config("SECRET_KEY", default="django-insecure-change-me-in-production")

DEBUG = config("DEBUG", default=False, cast=bool)

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())

ENVIRONMENT = config("ENVIRONMENT", default="development")
IS_PRODUCTION = ENVIRONMENT == "production"

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    "corsheaders",
    # Local
    "core",
    "accounts",
    "content",
    "images",
    "students",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "core.middleware.RequestLoggingMiddleware",
    "core.middleware.SentryContextMiddleware",
]

ROOT_URLCONF = "_core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "_core.wsgi.application"

# Database - SQLite by default, production switches to PostgreSQL
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": config("DATABASE_PATH", default=str(BASE_DIR / "db.sqlite3")),
    }
}

# Throttle counters live here. Point at Redis/Memcached to share limits
# between processes.
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "campus-cms",
    }
}

AUTH_USER_MODEL = "accounts.User"

PASSWORD_HASHERS = [
    "accounts.hashers.CampusBCryptPasswordHasher",
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
]

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = config("TIME_ZONE", default="Asia/Ho_Chi_Minh")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# =============================================================================
# REST FRAMEWORK
# =============================================================================

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "accounts.authentication.JWTAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "core.exceptions.campus_exception_handler",
    # Number of reverse proxies in front of the app; X-Forwarded-For is
    # ignored when zero.
    "NUM_PROXIES": config("TRUSTED_PROXY_COUNT", default=0, cast=int),
    "DEFAULT_THROTTLE_RATES": {
        "student_registration": config("STUDENT_REGISTRATION_RATE", default="3/m"),
        "image_upload": config("IMAGE_UPLOAD_RATE", default="20/15m"),
        "login": config("LOGIN_RATE", default="10/m"),
    },
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Campus CMS API",
    "DESCRIPTION": "Articles, categories, image assets and student registration",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}

# =============================================================================
# CORS
# =============================================================================

CORS_ALLOW_ALL_ORIGINS = config("CORS_ALLOW_ALL_ORIGINS", default=False, cast=bool)
CORS_ALLOWED_ORIGINS = config(
    "CORS_ALLOWED_ORIGINS", default="http://localhost:3000", cast=Csv()
)

# =============================================================================
# AUTHENTICATION
# =============================================================================

JWT_SECRET_KEY = config("JWT_SECRET_KEY", default=SECRET_KEY)
JWT_ALGORITHM = config("JWT_ALGORITHM", default="HS256")
JWT_ACCESS_TOKEN_LIFETIME = timedelta(
    minutes=config("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", default=60 * 24, cast=int)
)
JWT_REFRESH_TOKEN_LIFETIME = timedelta(
    days=config("JWT_REFRESH_TOKEN_EXPIRE_DAYS", default=7, cast=int)
)
BCRYPT_ROUNDS = config("BCRYPT_ROUNDS", default=12, cast=int)

# =============================================================================
# STUDENT REGISTRATION
# =============================================================================

RECAPTCHA_ENABLED = config("RECAPTCHA_ENABLED", default=False, cast=bool)
RECAPTCHA_SECRET_KEY = config("RECAPTCHA_SECRET_KEY", default="")
RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
RECAPTCHA_TIMEOUT_SECONDS = config("RECAPTCHA_TIMEOUT_SECONDS", default=5, cast=float)

CAMPUS_DDOS_GUARD = {
    "threshold": config("DDOS_THRESHOLD", default=10, cast=int),
    "sustain_seconds": config("DDOS_SUSTAIN_SECONDS", default=30, cast=int),
    "block_seconds": config("DDOS_BLOCK_SECONDS", default=15 * 60, cast=int),
}

# =============================================================================
# IMAGE PIPELINE
# =============================================================================

CAMPUS_MEDIA_ROOT = Path(config("CAMPUS_MEDIA_ROOT", default=str(BASE_DIR / "media")))

CAMPUS_IMAGE_PIPELINE = {
    "MAX_UPLOAD_BYTES": 10 * 1024 * 1024,
    "MAX_WIDTH": 1200,
    "JPEG_QUALITY": 80,
    "ALLOWED_TYPES": {
        "image/jpeg": (".jpg", ".jpeg"),
        "image/png": (".png",),
        "image/gif": (".gif",),
        "image/webp": (".webp",),
    },
    "TEMP_RETENTION_HOURS": config("TEMP_IMAGE_RETENTION_HOURS", default=24, cast=int),
}

# The size handler runs first and aborts anything larger than
# MAX_UPLOAD_BYTES while chunks are still arriving.
FILE_UPLOAD_HANDLERS = [
    "images.upload_handlers.MaxUploadSizeHandler",
    "django.core.files.uploadhandler.MemoryFileUploadHandler",
    "django.core.files.uploadhandler.TemporaryFileUploadHandler",
]
FILE_UPLOAD_TEMP_DIR = config("FILE_UPLOAD_TEMP_DIR", default=None)

# =============================================================================
# OBSERVABILITY
# =============================================================================

SENTRY_DSN = config("SENTRY_DSN", default="")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": config("LOG_LEVEL", default="INFO"),
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "campus.security": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "campus.audit": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
}
