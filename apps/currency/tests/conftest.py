import pytest
from decimal import Decimal
from apps.currency.models import ExchangeRate, RateSource


@pytest.fixture
def stored_rates(db):
    """Rates as an admin would have saved them (units per 1 MGA)."""
    for code, rate in {'MGA': '1', 'EUR': '0.0002', 'USD': '0.00025', 'GBP': '0.00016'}.items():
        ExchangeRate.objects.create(currency=code, rate=Decimal(rate), source=RateSource.MANUAL)


@pytest.fixture
def provider_payload():
    return {
        'success': True,
        'base': 'USD',
        'rates': {'USD': 1, 'EUR': 0.92, 'GBP': 0.8, 'MGA': 4600, 'JPY': 150},
    }
