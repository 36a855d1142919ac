"""
Add celery-beat schedule for re-queuing stale transfer intents.

Creates the periodic task for retry_pending_transfers, which runs every
5 minutes and re-queues intents still pending after their execution
task was lost.
"""

from django.db import migrations

TASK_NAME = "Retry Pending Donation Transfers"


def create_periodic_task(apps, schema_editor):
    """Create the periodic task for stale transfer intents."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    schedule, _ = IntervalSchedule.objects.get_or_create(
        every=5,
        period="minutes",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "donations.tasks.retry_pending_transfers",
            "interval": schedule,
            "enabled": True,
            "description": (
                "Re-queues transfer intents left pending after their "
                "execution task never reached a worker."
            ),
        },
    )


def remove_periodic_task(apps, schema_editor):
    """Remove the periodic task on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("donations", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
