"""
Synchronise exchange rates with the external provider.

Usage:
    python manage.py sync_exchange_rates
"""

from django.core.management.base import BaseCommand, CommandError

from apps.currency.services import sync_rates_from_provider, ExchangeRateProviderError


class Command(BaseCommand):
    help = 'Fetch current exchange rates and store them against MGA'

    def handle(self, *args, **options):
        try:
            rates = sync_rates_from_provider()
        except ExchangeRateProviderError as e:
            raise CommandError(f'Sync failed, previous rates kept: {e}')

        for code, rate in sorted(rates.items()):
            self.stdout.write(f'  1 MGA = {rate} {code}')
        self.stdout.write(self.style.SUCCESS(f'{len(rates)} exchange rates updated'))
