""" When you run Celery workers, "celery -A fin_project worker -l info"
    The -A fin_project means:
    Import fin_project/__init__.py →
    which exposes celery_app →  now Celery knows what to run. """
from __future__ import annotations
import os
from celery import Celery

# ensure Django settings are set for Celery
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "fin_project.settings")

celery_app = Celery("fin_project")

# read config from Django settings, using CELERY_ prefix
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

# autoload tasks from installed apps (finance_core.tasks)
celery_app.autodiscover_tasks()
