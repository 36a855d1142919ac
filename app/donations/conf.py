"""
Runtime configuration for the donation ledger.

Reads the DONATIONS_* Django settings (populated from the environment by
django-environ in config/settings.py) into one immutable object, falling
back to the defaults in donations.constants.

Usage:
    from donations.conf import get_ledger_settings

    conf = get_ledger_settings()
    conf.storage_cost  # 10**21
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings

from . import constants


@dataclass(frozen=True)
class LedgerSettings:
    """
    Effective ledger configuration.

    Attributes:
        contract_account_id: The ledger's own identity; the only caller
            allowed to initialize it or change its beneficiary
        storage_cost: Fixed fee deducted from every donation
        default_page_limit: Page size for get_donations without a limit
        transfer_backend: Dotted path of the TransferBackend class
        transfer_max_retries: Celery retries for a failing transfer, read
            by execute_transfer_intent on every run
    """

    contract_account_id: str
    storage_cost: int
    default_page_limit: int
    transfer_backend: str
    transfer_max_retries: int


def get_ledger_settings() -> LedgerSettings:
    """Build LedgerSettings from the current Django settings."""
    return LedgerSettings(
        contract_account_id=getattr(
            settings,
            "DONATIONS_CONTRACT_ACCOUNT_ID",
            constants.DEFAULT_CONTRACT_ACCOUNT_ID,
        ),
        storage_cost=int(
            getattr(settings, "DONATIONS_STORAGE_COST", constants.STORAGE_COST)
        ),
        default_page_limit=int(
            getattr(
                settings,
                "DONATIONS_DEFAULT_PAGE_LIMIT",
                constants.DEFAULT_PAGE_LIMIT,
            )
        ),
        transfer_backend=getattr(
            settings,
            "DONATIONS_TRANSFER_BACKEND",
            constants.DEFAULT_TRANSFER_BACKEND,
        ),
        transfer_max_retries=int(
            getattr(
                settings,
                "DONATIONS_TRANSFER_MAX_RETRIES",
                constants.DEFAULT_TRANSFER_MAX_RETRIES,
            )
        ),
    )
