"""Services for multi-currency conversion."""

from .exceptions import (
    CurrencyServiceError,
    ExchangeRateMissingError,
    InvalidRateError,
    ExchangeRateProviderError,
)
from .conversion import get_rates, convert, to_base, quantize, format_amount
from .rate_provider import ExchangeRateClient
from .rate_management import set_rates, normalize_usd_rates, sync_rates_from_provider

__all__ = [
    # Exceptions
    'CurrencyServiceError',
    'ExchangeRateMissingError',
    'InvalidRateError',
    'ExchangeRateProviderError',
    # Services
    'get_rates',
    'convert',
    'to_base',
    'quantize',
    'format_amount',
    'ExchangeRateClient',
    'set_rates',
    'normalize_usd_rates',
    'sync_rates_from_provider',
]
