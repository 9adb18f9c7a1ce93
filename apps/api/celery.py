# apps/api/celery.py

from celery import Celery

# settings are not chosen here:
# DJANGO_SETTINGS_MODULE must be injected from outside (manage.py / worker env)

app = Celery("toeic")

app.config_from_object(
    "django.conf:settings",
    namespace="CELERY",
)

# tasks.py / tasks/ of every INSTALLED_APPS entry
app.autodiscover_tasks()
