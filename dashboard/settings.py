"""Django settings for the listing insights dashboard.

Configuration is driven by environment variables so deployments can point the
backend at a different dataset or tune the analysis thresholds.
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_int(name: str, *, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw.strip())


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-listing-insights-dev-key")
DEBUG = _env_bool("DJANGO_DEBUG", default=False)
ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "dashboard.urls"
WSGI_APPLICATION = "dashboard.wsgi.application"

DATABASES: dict = {}

USE_TZ = True
TIME_ZONE = "UTC"

# Listing analysis
DATASET_FILE_PATH = Path(os.getenv("LISTINGS_DATASET_PATH", str(BASE_DIR / "media" / "housing.csv")))
PREMIUM_MIN_SAMPLE_SIZE = _env_int("PREMIUM_MIN_SAMPLE_SIZE", default=5)
GROUP_MIN_SAMPLE_SIZE = _env_int("GROUP_MIN_SAMPLE_SIZE", default=0)
HISTOGRAM_DEFAULT_BINS = _env_int("HISTOGRAM_DEFAULT_BINS", default=15)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "analytics": {"level": LOG_LEVEL},
        "api": {"level": LOG_LEVEL},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
}
