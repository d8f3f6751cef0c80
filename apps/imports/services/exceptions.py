"""
Domain exceptions for import-cost services.

Exception Hierarchy:
    ImportsServiceError (base)
    ├── ImportValidationError
    ├── UnknownImportSettingError
    └── InvalidCalculationError
"""


class ImportsServiceError(Exception):
    """Base exception for import services."""
    pass


class ImportValidationError(ImportsServiceError):
    """Raised when simulation input is incomplete or inconsistent."""
    pass


class UnknownImportSettingError(ImportsServiceError):
    pass


class InvalidCalculationError(ImportsServiceError):
    """Raised when the computed total is not a positive amount."""
    pass
