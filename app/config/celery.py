"""
Celery configuration for the ledger backend.

Celery runs the background side of the ledger:
- The nightly balance consistency sweep (scheduled through django-celery-beat)
- On-demand reconciliation of a single account

Redis is both the message broker and result backend. Tasks are
auto-discovered from all installed Django apps.

Usage:
    from ledger.tasks import reconcile_single_account

    reconcile_single_account.delay(str(account.id), repair=True)

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

# Looks for a tasks.py module in each installed app
app.autodiscover_tasks()
