"""
Domain exceptions for quote services.

Exception Hierarchy:
    QuotesServiceError (base)
    ├── QuoteNotFoundError
    ├── QuoteTargetNotFoundError
    ├── DuplicateQuoteError
    ├── InvalidQuoteStateError
    └── InvalidQuotePriceError
"""


class QuotesServiceError(Exception):
    """Base exception for quote services."""
    pass


class QuoteNotFoundError(QuotesServiceError):
    pass


class QuoteTargetNotFoundError(QuotesServiceError):
    """Raised when the requested service or product does not exist."""
    pass


class DuplicateQuoteError(QuotesServiceError):
    """Raised when the user already has a pending quote for the item."""
    pass


class InvalidQuoteStateError(QuotesServiceError):
    """Raised when the quote's status does not allow the action."""
    pass


class InvalidQuotePriceError(QuotesServiceError):
    pass
