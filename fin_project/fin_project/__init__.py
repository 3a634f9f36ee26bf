# Celery instance is defined in fin_project/celery.py
# It points at Django settings and becomes the task queue app for the project
from .celery import celery_app

# 'from fin_project import *', only exports celery_app
__all__ = ("celery_app",)
