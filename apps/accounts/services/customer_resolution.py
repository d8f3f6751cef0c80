"""
Checkout identity resolution.

A storefront order may be placed by a signed-in user, by a returning
customer identified by email or phone, or by a new customer who asks for
an account to be created on the fly.
"""

import logging
from typing import Optional

from django.db import transaction
from django.contrib.auth import get_user_model

from ..models import UserRole
from .exceptions import CustomerNotFoundError, InvalidPasswordError

User = get_user_model()
logger = logging.getLogger(__name__)

MIN_CHECKOUT_PASSWORD_LENGTH = 6


@transaction.atomic
def find_or_create_customer(
    *,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    first_name: str = "",
    last_name: str = "",
    newsletter: bool = False,
    create_account: bool = False,
    password: Optional[str] = None,
) -> User:
    """
    Resolve the customer placing an order.

    Lookup is by email first, then by phone. When found in account-creation
    mode, names and phone are refreshed; otherwise only the newsletter flag
    is updated.

    Raises:
        CustomerNotFoundError: No user matches and create_account is False
        InvalidPasswordError: A checkout password shorter than 6 characters
    """
    if password and len(password) < MIN_CHECKOUT_PASSWORD_LENGTH:
        raise InvalidPasswordError(
            f"Password must be at least {MIN_CHECKOUT_PASSWORD_LENGTH} characters"
        )

    user = None
    if email:
        user = User.objects.select_for_update().filter(email__iexact=email).first()
    if user is None and phone:
        user = User.objects.select_for_update().filter(phone=phone).first()

    if user is not None:
        update_fields = ['newsletter']
        user.newsletter = newsletter
        if create_account:
            user.first_name = first_name or user.first_name
            user.last_name = last_name or user.last_name
            user.phone = phone or user.phone
            update_fields += ['first_name', 'last_name', 'phone']
            if password and not user.has_usable_password():
                user.set_password(password)
                update_fields.append('password')
        user.save(update_fields=update_fields)
        return user

    if not create_account:
        raise CustomerNotFoundError(
            "No customer found with this email or phone; create an account to continue"
        )

    user = User.objects.create_user(
        email=email or None,
        password=password,
        phone=phone or "",
        first_name=first_name,
        last_name=last_name,
        newsletter=newsletter,
        role=UserRole.CLIENT,
    )
    logger.info("Created customer %s during checkout", user.id)
    return user
