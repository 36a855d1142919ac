"""
Django admin configuration for donation ledger models.

Ledger state changes only through the ledger's own operations, so every
model here is read-only in the admin. Transfer intents are listed for
reconciliation of failed pay-outs.
"""

from django.contrib import admin

from .models import Donation, LedgerState, TransferIntent


class ReadOnlyAdminMixin:
    """Disables add, change and delete in the admin."""

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(LedgerState)
class LedgerStateAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = [
        "contract_account_id",
        "beneficiary",
        "donor_count",
        "created_at",
        "updated_at",
    ]
    search_fields = ["contract_account_id", "beneficiary"]
    readonly_fields = ["contract_account_id", "beneficiary", "created_at", "updated_at"]

    def donor_count(self, obj: LedgerState) -> int:
        return obj.donations.count()

    donor_count.short_description = "Donors"


@admin.register(Donation)
class DonationAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """
    Admin configuration for Donation.

    Totals are shown as stored (minor units); they exceed what a float
    can show exactly, so no currency formatting is applied.
    """

    list_display = ["id", "ledger", "account_id", "total_amount", "created_at"]
    list_filter = ["ledger"]
    search_fields = ["account_id"]
    ordering = ["id"]


@admin.register(TransferIntent)
class TransferIntentAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """
    Admin configuration for TransferIntent.

    Failed intents need manual reconciliation; filter by status to find them.
    """

    list_display = [
        "id",
        "donor_account_id",
        "receiver_account_id",
        "amount",
        "status",
        "attempts",
        "created_at",
    ]
    list_filter = ["status", "ledger"]
    search_fields = ["id", "donor_account_id", "receiver_account_id", "backend_reference"]
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": (
                    "id",
                    "ledger",
                    "donor_account_id",
                    "receiver_account_id",
                    "amount",
                ),
            },
        ),
        (
            "Execution",
            {
                "fields": (
                    "status",
                    "attempts",
                    "backend_reference",
                    "last_error",
                    "sent_at",
                ),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )
