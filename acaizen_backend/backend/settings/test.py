# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- In-memory SQLite
- No throttling, no auto-print (tests patch the printer helper explicitly)
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

AUTO_PRINT_ON_CHECKOUT = False
KITCHEN_CATEGORY_ID = 1
TIME_ZONE = "America/Sao_Paulo"
SENTRY_DSN = ""
