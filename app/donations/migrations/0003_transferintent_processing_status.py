from django.db import migrations, models

import donations.validators


class Migration(migrations.Migration):
    dependencies = [
        ("donations", "0002_add_pending_transfer_schedule"),
    ]

    operations = [
        migrations.AlterField(
            model_name="transferintent",
            name="status",
            field=models.CharField(
                choices=[
                    ("pending", "Pending"),
                    ("processing", "Processing"),
                    ("sent", "Sent"),
                    ("failed", "Failed"),
                ],
                db_index=True,
                default="pending",
                help_text="Execution status",
                max_length=20,
            ),
        ),
        migrations.AlterField(
            model_name="donation",
            name="account_id",
            field=models.CharField(
                help_text="Donor account",
                max_length=64,
                validators=[donations.validators.validate_account_id],
            ),
        ),
    ]
