"""
Subscription lifecycle and profile allocation.

A subscription reserves profiles on a shared account of the offer's
platform. Profiles are released when the subscription is cancelled or
expires.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from ..models import (
    Offer,
    PlatformOffer,
    StreamingAccount,
    AccountProfile,
    AccountStatus,
    Subscription,
    SubscriptionStatus,
    DurationUnit,
)
from .exceptions import (
    OfferNotFoundError,
    SubscriptionNotFoundError,
    InvalidSubscriptionStateError,
    ProfileAssignmentError,
)

logger = logging.getLogger(__name__)


@dataclass
class ProfileReservation:
    """Account and profiles picked ahead of subscription creation."""

    account_id: UUID
    profile_ids: List[UUID] = field(default_factory=list)


def _add_months(start: datetime, months: int) -> datetime:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def compute_end_date(start: datetime, duration: int, unit: str) -> datetime:
    """
    End of a subscription period.

    Months and years keep the day of month, clamped to the month length
    (Jan 31 + 1 month = Feb 28/29).
    """
    if unit == DurationUnit.DAY:
        return start + timedelta(days=duration)
    if unit == DurationUnit.YEAR:
        return _add_months(start, 12 * duration)
    return _add_months(start, duration)


def _default_platform_offer(offer: Offer) -> Optional[PlatformOffer]:
    return (
        offer.platform_offers
        .select_related('platform')
        .order_by('-is_default', 'platform__name')
        .first()
    )


def _profile_label(user, index: int) -> str:
    first_name = user.first_name or user.get_display_name()
    return f"{first_name} Main" if index == 0 else f"{first_name} {index + 1}"


def _assign(subscription: Subscription, profiles: List[AccountProfile]) -> None:
    already = subscription.profiles.count()
    for offset, profile in enumerate(profiles):
        profile.is_assigned = True
        profile.subscription = subscription
        profile.name = _profile_label(subscription.user, already + offset)
        profile.save(update_fields=['is_assigned', 'subscription', 'name'])

    for account_id in {p.account_id for p in profiles}:
        subscription.accounts.add(account_id)
        if not AccountProfile.objects.filter(account_id=account_id, is_assigned=False).exists():
            StreamingAccount.objects.filter(id=account_id).update(availability=False)


def find_available_account(platform, now=None) -> Optional[StreamingAccount]:
    """First ACTIVE, available, unexpired account of a platform with a free profile."""
    now = now or timezone.now()
    queryset = (
        StreamingAccount.objects
        .select_for_update()
        .filter(platform=platform, status=AccountStatus.ACTIVE, availability=True)
        .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
        .order_by('created_at')
    )
    if platform.has_profiles:
        candidate_ids = (
            StreamingAccount.objects
            .filter(platform=platform)
            .annotate(free=Count('profiles', filter=Q(profiles__is_assigned=False)))
            .filter(free__gt=0)
            .values('id')
        )
        queryset = queryset.filter(id__in=candidate_ids)
    return queryset.first()


def _allocate_profiles(subscription: Subscription, reservation: Optional[ProfileReservation]) -> None:
    offer = subscription.offer
    platform_ids = set(offer.platform_offers.values_list('platform_id', flat=True))

    if reservation is not None:
        try:
            account = StreamingAccount.objects.select_for_update().get(id=reservation.account_id)
        except StreamingAccount.DoesNotExist:
            raise ProfileAssignmentError("Reserved account does not exist")
        if account.platform_id not in platform_ids:
            raise ProfileAssignmentError("Reserved account belongs to another platform")
        profiles = list(
            AccountProfile.objects.select_for_update()
            .filter(id__in=reservation.profile_ids, account=account, is_assigned=False)
        )
        if len(profiles) != len(set(reservation.profile_ids)):
            raise ProfileAssignmentError("Some reserved profiles are unavailable")
        if len(profiles) > offer.max_profiles:
            raise ProfileAssignmentError(
                f"Offer allows {offer.max_profiles} profile(s), {len(profiles)} reserved"
            )
        if profiles:
            _assign(subscription, profiles)
        else:
            subscription.accounts.add(account)
        return

    platform_offer = subscription.platform_offer
    if platform_offer is None:
        return
    platform = platform_offer.platform
    account = find_available_account(platform)
    if account is None:
        logger.warning(
            "No available %s account for subscription %s; profiles to assign manually",
            platform.name, subscription.id,
        )
        return

    if not platform.has_profiles:
        subscription.accounts.add(account)
        return

    free = list(
        AccountProfile.objects.select_for_update()
        .filter(account=account, is_assigned=False)
        .order_by('profile_slot')
    )
    count = min(offer.max_profiles, len(free))
    _assign(subscription, free[:count])
    logger.info(
        "Assigned %d profile(s) of account %s to subscription %s",
        count, account.id, subscription.id,
    )


@transaction.atomic
def create_subscription(
    *,
    user,
    offer: Offer,
    order=None,
    reservation: Optional[ProfileReservation] = None,
    activate: bool = False,
    start_date: Optional[datetime] = None,
) -> Subscription:
    """
    Create a subscription and allocate profiles.

    Without a reservation, profiles come from the first available account
    of the offer's default platform. A subscription is still created when
    no account is available.

    Raises:
        OfferNotFoundError: Offer inactive
        ProfileAssignmentError: Reservation invalid
    """
    if not offer.is_active:
        raise OfferNotFoundError(f"Offer {offer.name} is not available")

    start = start_date or timezone.now()
    subscription = Subscription.objects.create(
        user=user,
        offer=offer,
        order=order,
        platform_offer=_default_platform_offer(offer),
        status=SubscriptionStatus.ACTIVE if activate else SubscriptionStatus.PENDING,
        start_date=start,
        end_date=compute_end_date(start, offer.duration, offer.duration_unit),
    )
    _allocate_profiles(subscription, reservation)
    logger.info("Created subscription %s (%s)", subscription.id, subscription.status)
    return subscription


def _get_locked(subscription_id: UUID) -> Subscription:
    try:
        return (
            Subscription.objects
            .select_for_update()
            .select_related('offer', 'user')
            .get(id=subscription_id)
        )
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError(f"Subscription {subscription_id} not found")


@transaction.atomic
def assign_profiles(*, subscription_id: UUID, profile_ids: List[UUID]) -> List[AccountProfile]:
    """
    Manually assign profiles to a subscription.

    Raises:
        ProfileAssignmentError: Over-allocation beyond ``offer.max_profiles``,
            a profile already assigned or unknown, or a foreign platform
    """
    subscription = _get_locked(subscription_id)
    if not profile_ids:
        raise ProfileAssignmentError("Provide at least one profile")
    if subscription.status in (SubscriptionStatus.CANCELLED, SubscriptionStatus.EXPIRED):
        raise ProfileAssignmentError(f"Cannot assign profiles to a {subscription.status} subscription")

    remaining = subscription.offer.max_profiles - subscription.profiles.count()
    if len(profile_ids) > remaining:
        logger.warning("Refused over-allocation on subscription %s", subscription.id)
        raise ProfileAssignmentError(
            f"Too many profiles: {max(remaining, 0)} slot(s) remaining"
        )

    platform_ids = set(subscription.offer.platform_offers.values_list('platform_id', flat=True))
    profiles = list(
        AccountProfile.objects.select_for_update()
        .select_related('account')
        .filter(id__in=profile_ids)
    )
    if len(profiles) != len(set(profile_ids)):
        raise ProfileAssignmentError("Unknown profile")
    for profile in profiles:
        if profile.is_assigned:
            raise ProfileAssignmentError(f"Profile {profile.name} is already assigned")
        if profile.account.platform_id not in platform_ids:
            raise ProfileAssignmentError(f"Profile {profile.name} belongs to another platform")

    _assign(subscription, profiles)
    return profiles


def _release_profiles(subscription: Subscription) -> int:
    released = 0
    account_ids = set()
    for profile in AccountProfile.objects.select_related('account').filter(subscription=subscription):
        profile.is_assigned = False
        profile.subscription = None
        profile.name = profile.default_name()
        profile.save(update_fields=['is_assigned', 'subscription', 'name'])
        account_ids.add(profile.account_id)
        released += 1
    if account_ids:
        StreamingAccount.objects.filter(id__in=account_ids).update(availability=True)
    return released


@transaction.atomic
def release_profiles(*, subscription_id: UUID, profile_ids: Optional[List[UUID]] = None) -> int:
    """Release all (or the given) profiles of a subscription."""
    subscription = _get_locked(subscription_id)
    if profile_ids is None:
        return _release_profiles(subscription)

    released = 0
    for profile in AccountProfile.objects.select_related('account').filter(
        subscription=subscription, id__in=profile_ids
    ):
        profile.is_assigned = False
        profile.subscription = None
        profile.name = profile.default_name()
        profile.save(update_fields=['is_assigned', 'subscription', 'name'])
        StreamingAccount.objects.filter(id=profile.account_id).update(availability=True)
        released += 1
    return released


@transaction.atomic
def activate_subscription(*, subscription_id: UUID) -> Subscription:
    """PENDING -> ACTIVE; the paid period starts now."""
    subscription = _get_locked(subscription_id)
    if subscription.status == SubscriptionStatus.ACTIVE:
        return subscription
    if subscription.status != SubscriptionStatus.PENDING:
        raise InvalidSubscriptionStateError(
            f"Cannot activate a {subscription.status} subscription"
        )

    now = timezone.now()
    subscription.status = SubscriptionStatus.ACTIVE
    subscription.start_date = now
    subscription.end_date = compute_end_date(now, subscription.offer.duration, subscription.offer.duration_unit)
    subscription.save(update_fields=['status', 'start_date', 'end_date', 'updated_at'])
    logger.info("Activated subscription %s", subscription.id)
    return subscription


@transaction.atomic
def cancel_subscription(*, subscription_id: UUID) -> Subscription:
    subscription = _get_locked(subscription_id)
    if subscription.status in (SubscriptionStatus.CANCELLED, SubscriptionStatus.EXPIRED):
        raise InvalidSubscriptionStateError(f"Subscription is already {subscription.status}")

    subscription.status = SubscriptionStatus.CANCELLED
    subscription.auto_renew = False
    subscription.save(update_fields=['status', 'auto_renew', 'updated_at'])
    released = _release_profiles(subscription)
    logger.info("Cancelled subscription %s, released %d profile(s)", subscription.id, released)
    return subscription


@transaction.atomic
def renew_subscription(*, subscription_id: UUID) -> Subscription:
    """
    Extend an ACTIVE or EXPIRED subscription by one offer period.

    The new period starts at the current end date, or now when already
    expired; an expired subscription gets profiles allocated again.
    """
    subscription = _get_locked(subscription_id)
    if subscription.status not in (SubscriptionStatus.ACTIVE, SubscriptionStatus.EXPIRED):
        raise InvalidSubscriptionStateError(f"Cannot renew a {subscription.status} subscription")

    now = timezone.now()
    was_expired = subscription.status == SubscriptionStatus.EXPIRED
    base = max(subscription.end_date, now)
    if was_expired:
        subscription.start_date = now
    subscription.end_date = compute_end_date(base, subscription.offer.duration, subscription.offer.duration_unit)
    subscription.status = SubscriptionStatus.ACTIVE
    subscription.save(update_fields=['status', 'start_date', 'end_date', 'updated_at'])

    if was_expired and not subscription.profiles.exists():
        _allocate_profiles(subscription, None)
    logger.info("Renewed subscription %s until %s", subscription.id, subscription.end_date)
    return subscription


@transaction.atomic
def expire_subscriptions(*, now: Optional[datetime] = None) -> int:
    """Mark ACTIVE subscriptions past their end date EXPIRED and free their profiles."""
    now = now or timezone.now()
    expired = 0
    for subscription in (
        Subscription.objects
        .select_for_update()
        .filter(status=SubscriptionStatus.ACTIVE, end_date__lt=now)
    ):
        subscription.status = SubscriptionStatus.EXPIRED
        subscription.save(update_fields=['status', 'updated_at'])
        _release_profiles(subscription)
        expired += 1

    if expired:
        logger.info("Expired %d subscription(s)", expired)
    return expired
