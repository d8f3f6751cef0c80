"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    CustomerNotFoundError,
    InvalidPasswordError,
    AddressNotFoundError,
)
from .user_registration import register_user, create_employee
from .user_authentication import authenticate_user
from .customer_resolution import find_or_create_customer
from .address_management import create_address, set_default_address

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'CustomerNotFoundError',
    'InvalidPasswordError',
    'AddressNotFoundError',
    # Services
    'register_user',
    'create_employee',
    'authenticate_user',
    'find_or_create_customer',
    'create_address',
    'set_default_address',
]
