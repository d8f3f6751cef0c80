"""Login by email or phone number."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

logger = logging.getLogger(__name__)

User = get_user_model()


def _find_login_user(identifier: str):
    """Email match first, then the oldest account holding that phone number."""
    users = User.objects.select_for_update()
    user = users.filter(email__iexact=identifier).first()
    if user is None:
        user = users.filter(phone=identifier).order_by('created_at').first()
    return user


@transaction.atomic
def authenticate_user(*, identifier: str, password: str) -> User:
    """
    Check credentials and stamp ``last_login``.

    ``identifier`` is an email address or a phone number; phone-only
    customers created at checkout log in with their phone.

    Raises:
        InvalidCredentialsError: Unknown identifier or wrong password
        InactiveAccountError: Account is deactivated
    """
    identifier = (identifier or '').strip()
    user = _find_login_user(identifier) if identifier else None
    if user is None or not user.check_password(password):
        logger.warning("Failed login for %s", identifier)
        raise InvalidCredentialsError("Invalid email/phone or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    return user
