"""Domain-specific exceptions for site settings."""


class SiteConfigServiceError(Exception):
    """Base exception for site settings services."""
    pass


class InvalidSettingValueError(SiteConfigServiceError):
    """Raised when a value cannot be stored under the declared type."""
    pass
