"""
Generate follow-up tasks (expiring subscriptions, accounts to recharge,
payment reminders). Meant to run from cron, e.g. hourly.

Usage:
    python manage.py generate_tasks
"""

from django.core.management.base import BaseCommand

from apps.tasks.services import generate_all_tasks
from apps.tasks.services.task_generation import GENERATORS


class Command(BaseCommand):
    help = 'Create back-office tasks for subscriptions and accounts needing attention'

    def handle(self, *args, **options):
        summary = generate_all_tasks()

        for name in GENERATORS:
            self.stdout.write(f"  {name}: {summary[name]['created']} created")
        for error in summary['errors']:
            self.stderr.write(self.style.ERROR(error))
        self.stdout.write(self.style.SUCCESS(f"{summary['total_created']} task(s) created"))
