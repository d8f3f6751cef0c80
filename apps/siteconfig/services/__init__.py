"""Services for site settings."""

from .exceptions import SiteConfigServiceError, InvalidSettingValueError
from .settings_store import get_setting, set_setting, typed_value

__all__ = [
    # Exceptions
    'SiteConfigServiceError',
    'InvalidSettingValueError',
    # Services
    'get_setting',
    'set_setting',
    'typed_value',
]
