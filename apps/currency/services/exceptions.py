"""Domain-specific exceptions for currency services."""


class CurrencyServiceError(Exception):
    """Base exception for currency services."""
    pass


class ExchangeRateMissingError(CurrencyServiceError):
    """Raised when a currency has no usable (non-zero) rate."""
    pass


class InvalidRateError(CurrencyServiceError):
    """Raised when a submitted rate is not a positive number."""
    pass


class ExchangeRateProviderError(CurrencyServiceError):
    """Raised when the external rate provider fails or answers garbage."""
    pass
