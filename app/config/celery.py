"""
Celery configuration for the donation ledger service.

Celery runs the work the ledger hands off:
- Executing transfer intents (donations.tasks.execute_transfer_intent)
- Re-queuing stale pending intents on a schedule (django-celery-beat)

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps.

Usage:
    # Start a worker and the beat scheduler:
    celery -A config worker -l info
    celery -A config beat -l info

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
