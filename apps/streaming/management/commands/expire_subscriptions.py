"""
Expire subscriptions and gift cards past their end date.

Usage:
    python manage.py expire_subscriptions
"""

from django.core.management.base import BaseCommand

from apps.streaming.services import expire_subscriptions, expire_gift_cards


class Command(BaseCommand):
    help = 'Mark overdue subscriptions and gift cards as expired and free their profiles'

    def handle(self, *args, **options):
        subscriptions = expire_subscriptions()
        gift_cards = expire_gift_cards()
        self.stdout.write(self.style.SUCCESS(
            f'{subscriptions} subscription(s) and {gift_cards} gift card(s) expired'
        ))
