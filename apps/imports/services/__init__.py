"""Services for import-cost simulation."""

from .exceptions import (
    ImportsServiceError,
    ImportValidationError,
    UnknownImportSettingError,
    InvalidCalculationError,
)
from .import_settings import (
    DEFAULT_IMPORT_SETTINGS,
    get_import_settings,
    update_import_settings,
    init_import_settings,
)
from .calculator import WAREHOUSES, TRANSIT_TIMES, commission_key, calculate_import_cost
from .product_import import create_product_from_simulation

__all__ = [
    # Exceptions
    'ImportsServiceError',
    'ImportValidationError',
    'UnknownImportSettingError',
    'InvalidCalculationError',
    # Services
    'DEFAULT_IMPORT_SETTINGS',
    'get_import_settings',
    'update_import_settings',
    'init_import_settings',
    'WAREHOUSES',
    'TRANSIT_TIMES',
    'commission_key',
    'calculate_import_cost',
    'create_product_from_simulation',
]
