"""
Donations app configuration.

This app hosts the donation ledger:
- Per-account donation totals with a fixed storage cost
- Transfer intents paid out to the beneficiary by Celery workers
- REST API and management command for administration
"""

from django.apps import AppConfig


class DonationsConfig(AppConfig):
    """Configuration for the donations application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "donations"
    verbose_name = "Donations"
