"""
Currency conversion against the base currency (MGA).

All rates are expressed as units of a currency per 1 MGA; the base
currency itself always has rate 1.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional

from ..models import ExchangeRate, DEFAULT_RATES, SUPPORTED_CURRENCIES, BASE_CURRENCY
from .exceptions import ExchangeRateMissingError

ZERO_DECIMAL_CURRENCIES = {'MGA'}


def get_rates() -> Dict[str, Decimal]:
    """Return the current rate table, defaults filled in for missing codes."""
    rates = dict(DEFAULT_RATES)
    rates.update({
        row.currency: row.rate
        for row in ExchangeRate.objects.all()
    })
    rates[BASE_CURRENCY] = Decimal('1')
    return rates


def _rate_for(code: str, rates: Dict[str, Decimal]) -> Decimal:
    rate = rates.get(code)
    if not rate:
        raise ExchangeRateMissingError(f"No exchange rate for {code}")
    return Decimal(str(rate))


def convert(
    amount,
    from_currency: str,
    to_currency: str,
    rates: Optional[Dict[str, Decimal]] = None,
) -> Decimal:
    """
    Convert ``amount`` between two currencies.

    Raises:
        ExchangeRateMissingError: Either currency has no rate or a zero rate
    """
    amount = Decimal(str(amount))
    from_currency = from_currency.upper()
    to_currency = to_currency.upper()
    if from_currency == to_currency:
        return amount

    if rates is None:
        rates = get_rates()
    return amount * _rate_for(to_currency, rates) / _rate_for(from_currency, rates)


def to_base(amount, currency: str, rates: Optional[Dict[str, Decimal]] = None) -> Decimal:
    """Convert an amount into the base currency."""
    return convert(amount, currency, BASE_CURRENCY, rates)


def quantize(amount: Decimal, currency: str) -> Decimal:
    """Round to the currency's minor unit (whole ariary, cents otherwise)."""
    exponent = Decimal('1') if currency.upper() in ZERO_DECIMAL_CURRENCIES else Decimal('0.01')
    return Decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)


def format_amount(amount, currency: str = BASE_CURRENCY) -> str:
    """
    Human-readable amount, e.g. ``125 000 Ar`` or ``12.50 €``.

    Thousands are separated by a space.
    """
    currency = currency.upper()
    value = quantize(Decimal(str(amount)), currency)
    if currency in ZERO_DECIMAL_CURRENCIES:
        text = f"{value:,.0f}"
    else:
        text = f"{value:,.2f}"
    text = text.replace(',', ' ')
    symbol = SUPPORTED_CURRENCIES.get(currency, (currency, currency))[1]
    return f"{text} {symbol}"
