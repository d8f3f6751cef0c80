"""Stored calculation parameters with built-in defaults."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict

from django.db import transaction

from ..models import ImportSetting
from .exceptions import ImportValidationError, UnknownImportSettingError

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_SETTINGS = {
    'transport_france_rate': (Decimal('15'), 'Air/sea freight from France, EUR per kg'),
    'transport_usa_rate': (Decimal('35'), 'Air freight from the USA, EUR per kg'),
    'transport_uk_rate': (Decimal('18'), 'Air freight from the UK, EUR per kg'),
    'transport_china_rate': (Decimal('25'), 'Sea freight from China, EUR per kg'),
    'commission_0_10': (Decimal('25'), 'Commission % for prices below 10'),
    'commission_10_25': (Decimal('35'), 'Commission % for prices 10 to 25'),
    'commission_25_100': (Decimal('38'), 'Commission % for prices 25 to 100'),
    'commission_100_200': (Decimal('30'), 'Commission % for prices 100 to 200'),
    'commission_200_plus': (Decimal('25'), 'Commission % for prices from 200'),
    'processing_fee': (Decimal('2'), 'Flat processing fee, warehouse currency'),
    'tax_rate': (Decimal('3.5'), 'Tax % on the supplier price'),
}


def get_import_settings() -> Dict[str, Decimal]:
    """
    Current parameters keyed by name.

    Missing, zero or negative stored values fall back to the defaults.
    """
    values = {key: default for key, (default, _) in DEFAULT_IMPORT_SETTINGS.items()}
    for setting in ImportSetting.objects.filter(key__in=values.keys()):
        if setting.value is not None and setting.value > 0:
            values[setting.key] = setting.value
    return values


@transaction.atomic
def update_import_settings(*, values: Dict[str, object]) -> Dict[str, Decimal]:
    """
    Store new parameter values.

    Raises:
        UnknownImportSettingError: Key is not a known parameter
        ImportValidationError: Value is not a non-negative number
    """
    unknown = sorted(set(values) - set(DEFAULT_IMPORT_SETTINGS))
    if unknown:
        raise UnknownImportSettingError(f"Unknown setting(s): {', '.join(unknown)}")

    for key, raw in values.items():
        try:
            value = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            raise ImportValidationError(f"{key}: invalid number {raw!r}")
        if value < 0:
            raise ImportValidationError(f"{key}: value must not be negative")

        ImportSetting.objects.update_or_create(
            key=key,
            defaults={'value': value, 'description': DEFAULT_IMPORT_SETTINGS[key][1]},
        )

    logger.info("Updated import settings: %s", ', '.join(sorted(values)))
    return get_import_settings()


@transaction.atomic
def init_import_settings(*, overwrite: bool = False) -> int:
    """Seed default parameters; returns how many rows were written."""
    written = 0
    for key, (default, description) in DEFAULT_IMPORT_SETTINGS.items():
        if overwrite:
            ImportSetting.objects.update_or_create(
                key=key, defaults={'value': default, 'description': description}
            )
            written += 1
        else:
            _, created = ImportSetting.objects.get_or_create(
                key=key, defaults={'value': default, 'description': description}
            )
            written += int(created)
    return written
