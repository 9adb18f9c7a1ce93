# PATH: apps/api/config/settings/test.py
from .base import *

DEBUG = False

# file-backed so threads in transactional tests share one database;
# IMMEDIATE makes a second writer wait on BEGIN like a row lock would
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test.sqlite3",
        "OPTIONS": {
            "transaction_mode": "IMMEDIATE",
            "timeout": 20,
        },
        "TEST": {
            "NAME": str(BASE_DIR / "test.sqlite3"),
        },
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

RESULTS_RECALCULATION_ASYNC = False
RESULTS_WEAK_AREA_THRESHOLD = 0.6

LOGGING["root"]["level"] = "WARNING"
LOGGING["loggers"]["apps.domains.results"]["level"] = "WARNING"
