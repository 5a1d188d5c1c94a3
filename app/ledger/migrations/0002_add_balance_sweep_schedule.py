"""
Add celery-beat schedule for the nightly ledger balance sweep.

The sweep recomputes every account's balance from its live entries and
transactions and reports (and by default repairs) any drift.
"""

from django.db import migrations

TASK_NAME = "Ledger Balance Consistency Sweep"


def create_periodic_task(apps, schema_editor):
    """Create the nightly periodic task for the balance sweep."""
    CrontabSchedule = apps.get_model("django_celery_beat", "CrontabSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    # 02:30 UTC every day
    schedule, _ = CrontabSchedule.objects.get_or_create(
        minute="30",
        hour="2",
        day_of_week="*",
        day_of_month="*",
        month_of_year="*",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "ledger.tasks.sweep_ledger_balances",
            "crontab": schedule,
            "enabled": True,
            "description": (
                "Compares each account's stored balance with the sum of its "
                "live entries and transactions, and repairs drift when "
                "LEDGER_SWEEP_AUTO_REPAIR is enabled."
            ),
        },
    )


def remove_periodic_task(apps, schema_editor):
    """Remove the periodic task on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("ledger", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
