"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from ..models import UserRole
from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    first_name: str = "",
    last_name: str = "",
    phone: str = "",
    newsletter: bool = False,
) -> User:
    """
    Register a new client account.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        first_name: Optional first name
        last_name: Optional last name
        phone: Optional phone number
        newsletter: Newsletter opt-in

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or creation fails
    """
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            newsletter=newsletter,
            role=UserRole.CLIENT,
        )
    except (IntegrityError, ValueError) as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    logger.info("Registered user %s", user.id)
    return user


@transaction.atomic
def create_employee(
    *,
    email: str,
    password: str,
    role: str,
    first_name: str = "",
    last_name: str = "",
    phone: str = "",
) -> User:
    """Create a back-office account (STAFF or ADMIN)."""
    if role not in (UserRole.STAFF, UserRole.ADMIN):
        raise UserRegistrationError("Employee role must be STAFF or ADMIN")
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    user = User.objects.create_user(
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        role=role,
    )
    logger.info("Created employee %s with role %s", user.id, role)
    return user
