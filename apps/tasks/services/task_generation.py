"""
Automatic task generation.

Each generator scans for situations needing follow-up and creates one
task per target, never duplicating a task that is still open for the
same target. Generators return ``{"created": int, "errors": [str]}``.
"""

import logging
import math
from datetime import timedelta

from django.db import DatabaseError, transaction
from django.db.models import Exists, OuterRef
from django.utils import timezone

from apps.streaming.models import AccountStatus, StreamingAccount, Subscription, SubscriptionStatus
from ..models import Task, TaskPriority, TaskType, OPEN_TASK_STATUSES

logger = logging.getLogger(__name__)

SUBSCRIPTION_EXPIRY_WINDOW_DAYS = 7
ACCOUNT_RECHARGE_WINDOW_DAYS = 5
PAYMENT_REMINDER_AFTER_DAYS = 2


def days_until(moment, now) -> int:
    return math.ceil((moment - now).total_seconds() / 86400)


def _open_task(task_type: str, relation: str) -> Exists:
    return Exists(Task.objects.filter(
        type=task_type,
        status__in=OPEN_TASK_STATUSES,
        **{relation: OuterRef('pk')},
    ))


def _result():
    return {'created': 0, 'errors': []}


def _create(result, target_label: str, **fields) -> None:
    try:
        with transaction.atomic():
            Task.objects.create(**fields)
    except DatabaseError as e:
        logger.exception("Task generation failed for %s", target_label)
        result['errors'].append(f"{target_label}: {e}")
    else:
        result['created'] += 1


def generate_subscription_expiry_tasks(*, now=None) -> dict:
    """ACTIVE subscriptions ending within 7 days; HIGH when 3 days or less."""
    now = now or timezone.now()
    result = _result()
    subscriptions = (
        Subscription.objects
        .filter(
            status=SubscriptionStatus.ACTIVE,
            end_date__gte=now,
            end_date__lte=now + timedelta(days=SUBSCRIPTION_EXPIRY_WINDOW_DAYS),
        )
        .filter(~_open_task(TaskType.SUBSCRIPTION_EXPIRY, 'related_subscription'))
        .select_related('user', 'offer')
    )

    for subscription in subscriptions:
        days = days_until(subscription.end_date, now)
        customer = subscription.user.get_display_name()
        _create(
            result,
            f"subscription {subscription.id}",
            title=f"Abonnement expirant - {customer}",
            description=(
                f"L'abonnement \"{subscription.offer.name}\" de {customer} expire dans {days} jour(s). "
                f"Contacter le client pour renouvellement."
            ),
            type=TaskType.SUBSCRIPTION_EXPIRY,
            priority=TaskPriority.HIGH if days <= 3 else TaskPriority.MEDIUM,
            due_date=subscription.end_date,
            related_user=subscription.user,
            related_subscription=subscription,
            metadata={
                'subscription_end_date': subscription.end_date.isoformat(),
                'offer_name': subscription.offer.name,
                'days_until_expiry': days,
            },
        )
    return result


def generate_account_recharge_tasks(*, now=None) -> dict:
    """ACTIVE streaming accounts expiring within 5 days; URGENT when 2 days or less."""
    now = now or timezone.now()
    result = _result()
    accounts = (
        StreamingAccount.objects
        .filter(
            status=AccountStatus.ACTIVE,
            expires_at__gte=now,
            expires_at__lte=now + timedelta(days=ACCOUNT_RECHARGE_WINDOW_DAYS),
        )
        .filter(~_open_task(TaskType.ACCOUNT_RECHARGE, 'related_account'))
        .select_related('platform')
    )

    for account in accounts:
        days = days_until(account.expires_at, now)
        _create(
            result,
            f"account {account.id}",
            title=f"Recharger compte {account.platform.name}",
            description=(
                f"Le compte {account.username} ({account.platform.name}) expire dans {days} jour(s). "
                f"Recharger le compte avant expiration."
            ),
            type=TaskType.ACCOUNT_RECHARGE,
            priority=TaskPriority.URGENT if days <= 2 else TaskPriority.HIGH,
            due_date=account.expires_at,
            related_account=account,
            metadata={
                'account_username': account.username,
                'platform_name': account.platform.name,
                'expires_at': account.expires_at.isoformat(),
                'days_until_expiry': days,
            },
        )
    return result


def generate_payment_reminder_tasks(*, now=None) -> dict:
    """PENDING subscriptions created more than 2 days ago; due tomorrow."""
    now = now or timezone.now()
    result = _result()
    subscriptions = (
        Subscription.objects
        .filter(
            status=SubscriptionStatus.PENDING,
            created_at__lte=now - timedelta(days=PAYMENT_REMINDER_AFTER_DAYS),
        )
        .filter(~_open_task(TaskType.PAYMENT_REMINDER, 'related_subscription'))
        .select_related('user', 'offer')
    )

    for subscription in subscriptions:
        customer = subscription.user.get_display_name()
        waiting = days_until(now, subscription.created_at)
        _create(
            result,
            f"subscription {subscription.id}",
            title=f"Rappel de paiement - {customer}",
            description=(
                f"L'abonnement \"{subscription.offer.name}\" de {customer} est en attente de paiement "
                f"depuis {waiting} jours. Contacter le client."
            ),
            type=TaskType.PAYMENT_REMINDER,
            priority=TaskPriority.MEDIUM,
            due_date=now + timedelta(days=1),
            related_user=subscription.user,
            related_subscription=subscription,
            metadata={
                'offer_name': subscription.offer.name,
                'offer_price': str(subscription.offer.price),
                'subscription_created_at': subscription.created_at.isoformat(),
            },
        )
    return result


GENERATORS = {
    'subscription_expiry': generate_subscription_expiry_tasks,
    'account_recharge': generate_account_recharge_tasks,
    'payment_reminder': generate_payment_reminder_tasks,
}


def generate_all_tasks(*, now=None) -> dict:
    """
    Run every generator.

    Returns:
        dict with one result per generator, ``total_created`` and the
        combined ``errors`` list
    """
    now = now or timezone.now()
    summary = {'total_created': 0, 'errors': []}
    for name, generator in GENERATORS.items():
        result = generator(now=now)
        summary[name] = result
        summary['total_created'] += result['created']
        summary['errors'].extend(result['errors'])

    logger.info("Generated %d task(s), %d error(s)", summary['total_created'], len(summary['errors']))
    return summary
