from django.db import models
from decimal import Decimal
import uuid


BASE_CURRENCY = 'MGA'

# code -> (name, symbol)
SUPPORTED_CURRENCIES = {
    'MGA': ('Ariary Malgache', 'Ar'),
    'EUR': ('Euro', '€'),
    'USD': ('Dollar américain', '$'),
    'GBP': ('Livre sterling', '£'),
    'CAD': ('Dollar canadien', 'CA$'),
    'CHF': ('Franc suisse', 'CHF'),
}

# Units of the currency per 1 MGA
DEFAULT_RATES = {
    'MGA': Decimal('1'),
    'EUR': Decimal('0.000196'),
    'USD': Decimal('0.000214'),
    'GBP': Decimal('0.000168'),
}


class RateSource(models.TextChoices):
    DEFAULT = 'DEFAULT', 'Default'
    MANUAL = 'MANUAL', 'Manual'
    API = 'API', 'API'


class ExchangeRate(models.Model):
    """
    Conversion rate of one currency against the base currency.

    ``rate`` is the number of units of ``currency`` worth 1 MGA, so
    ``amount_in_target = amount * rate[target] / rate[source]``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    currency = models.CharField(max_length=3, unique=True)
    rate = models.DecimalField(max_digits=20, decimal_places=10)
    name = models.CharField(max_length=100, blank=True)
    symbol = models.CharField(max_length=10, blank=True)
    source = models.CharField(max_length=10, choices=RateSource.choices, default=RateSource.DEFAULT)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'exchange_rates'
        ordering = ['currency']

    def __str__(self):
        return f"1 {BASE_CURRENCY} = {self.rate} {self.currency}"

    def save(self, *args, **kwargs):
        self.currency = self.currency.upper()
        if not self.name and self.currency in SUPPORTED_CURRENCIES:
            self.name, self.symbol = SUPPORTED_CURRENCIES[self.currency]
        super().save(*args, **kwargs)
