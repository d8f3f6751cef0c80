"""
Delete expired guest carts.

Usage:
    python manage.py cleanup_carts
"""

from django.core.management.base import BaseCommand

from apps.orders.services import cleanup_expired_carts


class Command(BaseCommand):
    help = 'Delete guest carts past their expiry date'

    def handle(self, *args, **options):
        count = cleanup_expired_carts()
        self.stdout.write(self.style.SUCCESS(f'{count} expired cart(s) removed'))
