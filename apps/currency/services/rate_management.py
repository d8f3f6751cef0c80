"""Admin edits and provider synchronisation of exchange rates."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.siteconfig.models import SettingType, SettingGroup
from apps.siteconfig.services import set_setting
from ..models import ExchangeRate, RateSource, SUPPORTED_CURRENCIES, BASE_CURRENCY
from .exceptions import InvalidRateError
from .rate_provider import ExchangeRateClient

logger = logging.getLogger(__name__)

LAST_UPDATE_KEY = 'exchange_rates_last_update'


@transaction.atomic
def set_rates(*, rates: Dict[str, object], source: str = RateSource.MANUAL) -> Dict[str, Decimal]:
    """
    Store rates (units per 1 MGA). Rates must be positive; the base
    currency is always pinned to 1.

    Raises:
        InvalidRateError: A rate is missing, non-numeric or not positive
    """
    cleaned = {}
    for code, value in rates.items():
        code = code.upper()
        if len(code) != 3:
            raise InvalidRateError(f"Invalid currency code: {code}")
        if code == BASE_CURRENCY:
            continue
        try:
            rate = Decimal(str(value))
        except (InvalidOperation, TypeError):
            raise InvalidRateError(f"Invalid rate for {code}: {value!r}")
        if rate <= 0:
            raise InvalidRateError(f"Rate for {code} must be positive")
        cleaned[code] = rate

    cleaned[BASE_CURRENCY] = Decimal('1')
    for code, rate in cleaned.items():
        ExchangeRate.objects.update_or_create(
            currency=code,
            defaults={'rate': rate, 'source': source},
        )

    set_setting(
        key=LAST_UPDATE_KEY,
        value=timezone.now(),
        type=SettingType.DATE,
        group=SettingGroup.SYSTEM,
    )
    logger.info("Stored %d exchange rates (source=%s)", len(cleaned), source)
    return cleaned


def normalize_usd_rates(usd_rates: Dict[str, Decimal], usd_to_mga: Optional[Decimal] = None) -> Dict[str, Decimal]:
    """
    Turn USD-based provider rates into MGA-based rates:
    ``rate_c = usd_rate_c / usd_rate_MGA``.
    """
    usd_mga = usd_rates.get(BASE_CURRENCY) or usd_to_mga or settings.USD_TO_MGA_FALLBACK
    usd_mga = Decimal(str(usd_mga))
    return {
        code: (usd_rate / usd_mga).quantize(Decimal('0.0000000001'))
        for code, usd_rate in usd_rates.items()
        if code in SUPPORTED_CURRENCIES and usd_rate > 0
    }


def sync_rates_from_provider(client: Optional[ExchangeRateClient] = None) -> Dict[str, Decimal]:
    """
    Pull rates from the provider and store them.

    On provider failure the previous rates stay untouched and
    ExchangeRateProviderError propagates.
    """
    client = client or ExchangeRateClient()
    usd_rates = client.fetch_usd_rates()
    if BASE_CURRENCY not in usd_rates:
        logger.warning(
            "Provider omitted %s; using fallback USD rate %s",
            BASE_CURRENCY, settings.USD_TO_MGA_FALLBACK,
        )
    normalized = normalize_usd_rates(usd_rates)
    return set_rates(rates=normalized, source=RateSource.API)
