import pytest
from decimal import Decimal
from unittest.mock import patch

import httpx

from apps.currency.models import ExchangeRate, RateSource
from apps.currency.services import (
    get_rates,
    convert,
    to_base,
    format_amount,
    set_rates,
    normalize_usd_rates,
    sync_rates_from_provider,
    ExchangeRateClient,
    ExchangeRateMissingError,
    ExchangeRateProviderError,
    InvalidRateError,
)
from apps.siteconfig.services import get_setting


@pytest.mark.django_db
class TestConversion:

    def test_defaults_used_when_table_empty(self):
        rates = get_rates()

        assert rates['MGA'] == Decimal('1')
        assert rates['EUR'] == Decimal('0.000196')

    def test_identity(self):
        assert convert(Decimal('12.5'), 'EUR', 'eur') == Decimal('12.5')

    def test_base_to_foreign(self, stored_rates):
        assert convert(1000000, 'MGA', 'EUR') == Decimal('200')

    def test_foreign_to_base(self, stored_rates):
        assert to_base(50, 'EUR') == Decimal('250000')

    def test_cross_rate(self, stored_rates):
        # 0.00025 USD per MGA / 0.0002 EUR per MGA
        assert convert(100, 'EUR', 'USD') == Decimal('125')

    def test_unknown_currency(self, stored_rates):
        with pytest.raises(ExchangeRateMissingError):
            convert(10, 'XYZ', 'MGA')

    def test_zero_rate_is_missing(self):
        with pytest.raises(ExchangeRateMissingError):
            convert(10, 'EUR', 'MGA', rates={'EUR': Decimal('0'), 'MGA': Decimal('1')})

    def test_format_amount(self):
        assert format_amount(Decimal('125000.4'), 'MGA') == '125 000 Ar'
        assert format_amount(Decimal('12.5'), 'EUR') == '12.50 €'


@pytest.mark.django_db
class TestSetRates:

    def test_base_currency_pinned(self):
        set_rates(rates={'MGA': '5', 'EUR': '0.0002'})

        assert ExchangeRate.objects.get(currency='MGA').rate == Decimal('1')
        assert ExchangeRate.objects.get(currency='EUR').source == RateSource.MANUAL

    def test_rejects_non_positive(self):
        with pytest.raises(InvalidRateError):
            set_rates(rates={'EUR': '0'})

    def test_records_last_update(self):
        set_rates(rates={'EUR': '0.0002'})

        assert get_setting('exchange_rates_last_update') is not None


@pytest.mark.django_db
class TestProviderSync:

    def test_normalize_uses_provider_mga(self, provider_payload):
        usd_rates = {k: Decimal(str(v)) for k, v in provider_payload['rates'].items()}
        normalized = normalize_usd_rates(usd_rates)

        assert normalized['EUR'] == Decimal('0.0002')
        assert normalized['MGA'] == Decimal('1')
        # Unsupported currencies are dropped
        assert 'JPY' not in normalized

    def test_normalize_falls_back_when_mga_missing(self, settings):
        settings.USD_TO_MGA_FALLBACK = Decimal('5000')

        normalized = normalize_usd_rates({'USD': Decimal('1'), 'EUR': Decimal('1')})

        assert normalized['USD'] == Decimal('0.0002')

    def test_sync_stores_api_rates(self, provider_payload):
        response = httpx.Response(200, json=provider_payload)
        with patch.object(httpx.Client, 'get', return_value=response):
            sync_rates_from_provider()

        eur = ExchangeRate.objects.get(currency='EUR')
        assert eur.rate == Decimal('0.0002')
        assert eur.source == RateSource.API

    def test_provider_failure_keeps_previous_rates(self, stored_rates):
        with patch.object(httpx.Client, 'get', side_effect=httpx.ConnectError('boom')):
            with pytest.raises(ExchangeRateProviderError):
                sync_rates_from_provider()

        assert ExchangeRate.objects.get(currency='EUR').rate == Decimal('0.0002')
        assert ExchangeRate.objects.get(currency='EUR').source == RateSource.MANUAL

    def test_provider_http_error(self):
        with patch.object(httpx.Client, 'get', return_value=httpx.Response(500)):
            with pytest.raises(ExchangeRateProviderError):
                ExchangeRateClient(base_url='https://rates.test/latest', api_key='').fetch_usd_rates()

    def test_provider_unsuccessful_payload(self):
        response = httpx.Response(200, json={'success': False})
        with patch.object(httpx.Client, 'get', return_value=response):
            with pytest.raises(ExchangeRateProviderError):
                ExchangeRateClient().fetch_usd_rates()
