"""Platforms, shared accounts and their profile slots."""

import logging
from typing import Optional, Dict, Any
from uuid import UUID

from django.db import transaction

from apps.catalog.services import unique_slug
from ..models import Platform, StreamingAccount, AccountProfile, AccountStatus
from .exceptions import (
    PlatformNotFoundError,
    AccountNotFoundError,
    AccountUpdateError,
    ProfileDeletionError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def create_platform(*, name: str, **fields: Any) -> Platform:
    return Platform.objects.create(
        name=name,
        slug=unique_slug(Platform, name, max_length=120),
        **fields,
    )


def _create_profile_slots(account: StreamingAccount) -> None:
    platform = account.platform
    if not platform.has_profiles:
        return
    AccountProfile.objects.bulk_create([
        AccountProfile(
            account=account,
            profile_slot=slot,
            name=f"{account.username} - Profile {slot}",
        )
        for slot in range(1, platform.max_profiles_per_account + 1)
    ])


@transaction.atomic
def create_account(
    *,
    platform_id: UUID,
    username: str,
    password: str,
    email: str = '',
    expires_at=None,
    status: str = AccountStatus.ACTIVE,
    notes: str = '',
) -> StreamingAccount:
    """
    Create a shared account and, when the platform has profiles, its
    slots 1..max_profiles_per_account named "<username> - Profile <n>".
    """
    try:
        platform = Platform.objects.get(id=platform_id)
    except Platform.DoesNotExist:
        raise PlatformNotFoundError(f"Platform {platform_id} not found")

    account = StreamingAccount.objects.create(
        platform=platform,
        username=username,
        password=password,
        email=email,
        expires_at=expires_at,
        status=status,
        notes=notes,
    )
    _create_profile_slots(account)
    logger.info("Created %s account %s", platform.name, account.id)
    return account


@transaction.atomic
def update_account(*, account_id: UUID, data: Dict[str, Any]) -> StreamingAccount:
    """
    Update an account.

    The platform cannot change once profiles exist; a username change
    renames the unassigned profiles.

    Raises:
        AccountNotFoundError: Unknown account
        AccountUpdateError: Platform change on an account with profiles
    """
    try:
        account = StreamingAccount.objects.select_for_update().get(id=account_id)
    except StreamingAccount.DoesNotExist:
        raise AccountNotFoundError(f"Account {account_id} not found")

    data = dict(data)
    new_platform = data.pop('platform', None)
    if new_platform is not None and new_platform.id != account.platform_id:
        if account.profiles.exists():
            raise AccountUpdateError("Cannot change the platform of an account that has profiles")
        account.platform = new_platform

    old_username = account.username
    for field, value in data.items():
        setattr(account, field, value)
    account.save()

    if account.username != old_username:
        for profile in account.profiles.filter(is_assigned=False):
            profile.name = profile.default_name()
            profile.save(update_fields=['name'])

    if new_platform is not None and not account.profiles.exists():
        _create_profile_slots(account)
    return account


@transaction.atomic
def delete_profile(*, profile_id: UUID) -> None:
    """Delete a profile slot; the last slot and assigned slots are kept."""
    try:
        profile = AccountProfile.objects.select_related('account').get(id=profile_id)
    except AccountProfile.DoesNotExist:
        raise ProfileDeletionError("Profile not found")

    if profile.is_assigned:
        raise ProfileDeletionError("Cannot delete a profile assigned to a subscription")
    if profile.account.profiles.count() <= 1:
        raise ProfileDeletionError("Cannot delete the last profile of an account")
    profile.delete()
