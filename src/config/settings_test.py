"""Settings used by the pytest suite.

Provides the secrets the base settings refuse to default, then overrides the
infrastructure pieces tests must not depend on (Redis, a Celery broker).
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("INTERNAL_API_KEY", "test-internal-key")
os.environ.setdefault("THIRD_PARTY_ORDER_TOKEN", "test-third-party-token")

from config.settings import *  # noqa: E402,F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

THIRD_PARTY_ORDER_URL = "https://third-party.test/salesOrder"
THIRD_PARTY_TIMEOUT = 5.0
