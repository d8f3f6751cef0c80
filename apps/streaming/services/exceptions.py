"""
Domain exceptions for streaming resale services.

Exception Hierarchy:
    StreamingServiceError (base)
    ├── PlatformNotFoundError
    ├── AccountNotFoundError
    ├── AccountUpdateError
    ├── ProfileDeletionError
    ├── OfferValidationError
    ├── OfferNotFoundError
    ├── SubscriptionNotFoundError
    ├── InvalidSubscriptionStateError
    ├── ProfileAssignmentError
    └── GiftCardError
        ├── GiftCardNotFoundError
        └── GiftCardUnavailableError
"""


class StreamingServiceError(Exception):
    """Base exception for streaming services."""
    pass


class PlatformNotFoundError(StreamingServiceError):
    pass


class AccountNotFoundError(StreamingServiceError):
    pass


class AccountUpdateError(StreamingServiceError):
    """Raised when an account change would orphan its profiles."""
    pass


class ProfileDeletionError(StreamingServiceError):
    """Raised when deleting the last or an assigned profile of an account."""
    pass


class OfferValidationError(StreamingServiceError):
    """Raised when an offer breaks the platform/price/duration rules."""
    pass


class OfferNotFoundError(StreamingServiceError):
    pass


class SubscriptionNotFoundError(StreamingServiceError):
    pass


class InvalidSubscriptionStateError(StreamingServiceError):
    """Raised when an operation is not allowed in the subscription's status."""
    pass


class ProfileAssignmentError(StreamingServiceError):
    """Raised when profiles cannot be assigned to a subscription."""
    pass


class GiftCardError(StreamingServiceError):
    pass


class GiftCardNotFoundError(GiftCardError):
    pass


class GiftCardUnavailableError(GiftCardError):
    """Raised when a gift card is used, expired or its platform has no gift cards."""
    pass
