import uuid

import django.db.models.deletion
from django.db import migrations, models

import donations.fields
import donations.validators


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LedgerState",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "contract_account_id",
                    models.CharField(
                        help_text="Account that owns this ledger",
                        max_length=64,
                        unique=True,
                        validators=[donations.validators.validate_account_id],
                    ),
                ),
                (
                    "beneficiary",
                    models.CharField(
                        help_text="Account that receives net donations",
                        max_length=64,
                        validators=[donations.validators.validate_account_id],
                    ),
                ),
            ],
            options={
                "verbose_name": "ledger state",
                "ordering": ["contract_account_id"],
            },
        ),
        migrations.CreateModel(
            name="Donation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "account_id",
                    models.CharField(help_text="Donor account", max_length=64),
                ),
                (
                    "total_amount",
                    donations.fields.U128Field(
                        default=0,
                        help_text="Accumulated net donations in minor units",
                    ),
                ),
                (
                    "ledger",
                    models.ForeignKey(
                        help_text="Ledger this donation total belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="donations",
                        to="donations.ledgerstate",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("ledger", "account_id"),
                        name="unique_donation_per_account",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="TransferIntent",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "donor_account_id",
                    models.CharField(
                        help_text="Donor whose donation produced this transfer",
                        max_length=64,
                    ),
                ),
                (
                    "receiver_account_id",
                    models.CharField(
                        help_text="Beneficiary at the time of the donation",
                        max_length=64,
                    ),
                ),
                (
                    "amount",
                    donations.fields.U128Field(
                        help_text="Net amount to send in minor units"
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("sent", "Sent"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        help_text="Execution status",
                        max_length=20,
                    ),
                ),
                (
                    "attempts",
                    models.PositiveIntegerField(
                        default=0, help_text="Number of execution attempts"
                    ),
                ),
                (
                    "backend_reference",
                    models.CharField(
                        blank=True,
                        help_text="Identifier returned by the transfer backend",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "last_error",
                    models.TextField(
                        blank=True,
                        help_text="Error from the most recent failed attempt",
                        null=True,
                    ),
                ),
                (
                    "sent_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the transfer backend accepted the transfer",
                        null=True,
                    ),
                ),
                (
                    "ledger",
                    models.ForeignKey(
                        help_text="Ledger that issued this transfer",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transfer_intents",
                        to="donations.ledgerstate",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "created_at"],
                        name="transfer_intent_status_idx",
                    )
                ],
            },
        ),
    ]
