# PATH: apps/api/config/settings/worker.py

from .base import *
import os

# the worker serves no URLs
ROOT_URLCONF = None

# ==================================================
# Celery (worker only)
# ==================================================

CELERY_BROKER_URL = os.environ["CELERY_BROKER_URL"]
CELERY_RESULT_BACKEND = os.environ["CELERY_RESULT_BACKEND"]

CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ACKS_LATE = True
CELERY_TASK_REJECT_ON_WORKER_LOST = True
CELERY_WORKER_PREFETCH_MULTIPLIER = 1

# the worker is the one running the cascade; never re-enqueue from inside it
RESULTS_RECALCULATION_ASYNC = False
