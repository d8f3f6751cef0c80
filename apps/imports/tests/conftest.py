import pytest
from decimal import Decimal
from apps.currency.models import ExchangeRate, RateSource


@pytest.fixture
def rates(db):
    """1 EUR = 5000 MGA, 1 USD = 4000 MGA, 1 GBP = 6250 MGA."""
    for code, rate in {'EUR': '0.0002', 'USD': '0.00025', 'GBP': '0.00016'}.items():
        ExchangeRate.objects.create(currency=code, rate=Decimal(rate), source=RateSource.MANUAL)


@pytest.fixture
def air_france_payload():
    return {
        'mode': 'air',
        'supplier_price': '50',
        'supplier_currency': 'EUR',
        'weight': '2',
        'warehouse': 'france',
        'product_name': 'Casque audio',
    }
