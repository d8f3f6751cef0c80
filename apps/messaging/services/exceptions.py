"""
Domain exceptions for messaging services.

Exception Hierarchy:
    MessagingServiceError (base)
    ├── RecipientNotFoundError
    ├── InvalidRecipientError
    ├── MessageNotFoundError
    └── MessagePermissionError
"""


class MessagingServiceError(Exception):
    """Base exception for messaging services."""
    pass


class RecipientNotFoundError(MessagingServiceError):
    pass


class InvalidRecipientError(MessagingServiceError):
    """Raised when a user sends a message to themselves."""
    pass


class MessageNotFoundError(MessagingServiceError):
    pass


class MessagePermissionError(MessagingServiceError):
    """Raised when a user acts on a message that is not theirs."""
    pass
