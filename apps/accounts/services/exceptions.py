"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class CustomerNotFoundError(AccountsServiceError):
    """Raised when checkout cannot resolve a customer and no account may be created."""
    pass


class InvalidPasswordError(AccountsServiceError):
    """Raised when a password does not meet checkout requirements."""
    pass


class AddressNotFoundError(AccountsServiceError):
    """Raised when an address does not exist or belongs to another user."""
    pass
