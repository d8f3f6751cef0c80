"""HTTP client for the external exchange-rate provider."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict

import httpx
from django.conf import settings

from .exceptions import ExchangeRateProviderError

logger = logging.getLogger(__name__)


class ExchangeRateClient:
    """
    Fetches USD-based rates (units of each currency per 1 USD).

    The provider answers ``{"success": true, "base": "USD", "rates": {...}}``.
    """

    def __init__(self, base_url=None, api_key=None, timeout=None):
        self.base_url = base_url or settings.EXCHANGE_RATES_API_URL
        self.api_key = api_key if api_key is not None else settings.EXCHANGE_RATES_API_KEY
        self.timeout = timeout or settings.EXCHANGE_RATES_TIMEOUT

    def fetch_usd_rates(self) -> Dict[str, Decimal]:
        params = {'base': 'USD'}
        if self.api_key:
            params['api_key'] = self.api_key

        try:
            with httpx.Client(timeout=self.timeout) as client:
                r = client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            logger.error("Exchange-rate provider unreachable: %s", e)
            raise ExchangeRateProviderError(f"Provider unreachable: {e}")

        if r.status_code != 200:
            logger.error("Exchange-rate provider answered %s", r.status_code)
            raise ExchangeRateProviderError(f"Provider error: HTTP {r.status_code}")

        try:
            data = r.json()
        except ValueError:
            raise ExchangeRateProviderError("Provider returned invalid JSON")

        if not data.get('success', True) or not isinstance(data.get('rates'), dict):
            raise ExchangeRateProviderError("Provider response has no rates")

        rates = {}
        for code, value in data['rates'].items():
            try:
                rates[code.upper()] = Decimal(str(value))
            except (InvalidOperation, AttributeError):
                logger.warning("Skipping unparseable rate for %s: %r", code, value)
        return rates
