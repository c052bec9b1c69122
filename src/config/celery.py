"""
Celery application for the Rice Mart storefront.

``DJANGO_SETTINGS_MODULE`` is set before the app is instantiated so the
worker reads its configuration from Django settings (``CELERY_`` prefix).
Low-stock alert delivery runs here, detached from the checkout request.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("ricemart")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up modules.inventory.tasks
app.autodiscover_tasks()
