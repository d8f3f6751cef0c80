"""Typed read/write access to SiteSetting rows."""

import json
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils.dateparse import parse_date, parse_datetime

from ..models import SiteSetting, SettingType, SettingGroup
from .exceptions import InvalidSettingValueError

logger = logging.getLogger(__name__)

TRUE_VALUES = {'true', '1', 'yes', 'on'}
_MISSING = object()


def _parse(raw: str, setting_type: str):
    if setting_type == SettingType.NUMBER:
        return Decimal(raw)
    if setting_type == SettingType.BOOLEAN:
        return raw.strip().lower() in TRUE_VALUES
    if setting_type == SettingType.JSON:
        return json.loads(raw)
    if setting_type == SettingType.DATE:
        parsed = parse_date(raw) or parse_datetime(raw)
        if parsed is None:
            raise ValueError(f"Invalid date: {raw}")
        return parsed
    return raw


def _serialize(value, setting_type: str) -> str:
    if setting_type == SettingType.NUMBER:
        try:
            return str(Decimal(str(value)))
        except InvalidOperation:
            raise InvalidSettingValueError(f"Not a number: {value!r}")
    if setting_type == SettingType.BOOLEAN:
        if isinstance(value, str):
            return 'true' if value.strip().lower() in TRUE_VALUES else 'false'
        return 'true' if value else 'false'
    if setting_type == SettingType.JSON:
        if isinstance(value, str):
            try:
                json.loads(value)
            except ValueError:
                raise InvalidSettingValueError("Invalid JSON value")
            return value
        return json.dumps(value)
    if setting_type == SettingType.DATE:
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        if parse_date(str(value)) is None and parse_datetime(str(value)) is None:
            raise InvalidSettingValueError(f"Invalid date: {value!r}")
        return str(value)
    return '' if value is None else str(value)


def typed_value(setting: SiteSetting):
    """Return the setting value converted to its declared type."""
    return _parse(setting.value, setting.type)


def get_setting(key: str, default=None):
    """
    Read a typed setting.

    Returns ``default`` when the key is unknown or the stored value no
    longer parses under its type.
    """
    setting = SiteSetting.objects.filter(key=key).first()
    if setting is None:
        return default
    try:
        return typed_value(setting)
    except (ValueError, InvalidOperation):
        logger.warning("Setting %s holds an invalid %s value", key, setting.type)
        return default


@transaction.atomic
def set_setting(
    *,
    key: str,
    value,
    type: str = None,
    group: str = None,
    description: str = None,
) -> SiteSetting:
    """Create or update a setting; the existing type and group are kept unless given."""
    setting = SiteSetting.objects.select_for_update().filter(key=key).first()
    if setting is None:
        setting = SiteSetting(
            key=key,
            type=type or SettingType.STRING,
            group=group or SettingGroup.GENERAL,
        )
    else:
        if type:
            setting.type = type
        if group:
            setting.group = group

    setting.value = _serialize(value, setting.type)
    if description is not None:
        setting.description = description
    setting.save()
    logger.info("Setting %s updated", key)
    return setting
