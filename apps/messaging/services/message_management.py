"""Sending, replying to and filing messages."""

import logging
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Case, IntegerField, Q, QuerySet, Value, When
from django.utils import timezone

from ..models import Message, MessageType, MessagePriority, MessageStatus
from .exceptions import (
    RecipientNotFoundError,
    InvalidRecipientError,
    MessageNotFoundError,
    MessagePermissionError,
)

User = get_user_model()
logger = logging.getLogger(__name__)

PRIORITY_RANK = {
    MessagePriority.URGENT: 0,
    MessagePriority.HIGH: 1,
    MessagePriority.NORMAL: 2,
    MessagePriority.LOW: 3,
}


@transaction.atomic
def send_admin_message(
    *,
    sender,
    recipient_id: UUID,
    subject: str,
    content: str,
    type: str = MessageType.GENERAL,
    priority: str = MessagePriority.NORMAL,
    order=None,
) -> Message:
    """
    Back-office message to a user.

    Raises:
        RecipientNotFoundError: Unknown recipient
        InvalidRecipientError: Recipient is the sender
    """
    try:
        recipient = User.objects.get(id=recipient_id)
    except User.DoesNotExist:
        raise RecipientNotFoundError("Recipient not found")
    if recipient.id == sender.id:
        raise InvalidRecipientError("You cannot send a message to yourself")

    message = Message.objects.create(
        sender=sender,
        recipient=recipient,
        subject=subject,
        content=content,
        type=type,
        priority=priority,
        order=order,
    )
    logger.info("Message %s sent to user %s", message.id, recipient.id)
    return message


def send_contact_message(
    *,
    name: str,
    email: str,
    subject: str,
    content: str,
    phone: str = '',
    sender=None,
) -> Message:
    """Public contact form, addressed to the back-office team."""
    return Message.objects.create(
        sender=sender if sender is not None and sender.is_authenticated else None,
        guest_name=name,
        guest_email=email,
        guest_phone=phone,
        subject=subject,
        content=content,
        type=MessageType.SUPPORT,
    )


def client_message_to_admins(
    *,
    sender,
    subject: str,
    content: str,
    type: str = MessageType.GENERAL,
    order=None,
) -> Message:
    if order is not None and order.user_id != sender.id:
        raise MessagePermissionError("Order does not belong to you")
    return Message.objects.create(
        sender=sender,
        subject=subject,
        content=content,
        type=type,
        order=order,
    )


def notify_user(
    *,
    user,
    subject: str,
    content: str,
    type: str = MessageType.GENERAL,
    priority: str = MessagePriority.NORMAL,
    order=None,
) -> Message:
    """System notification (no sender) to a user."""
    return Message.objects.create(
        recipient=user,
        subject=subject,
        content=content,
        type=type,
        priority=priority,
        order=order,
    )


def _can_access(user, message: Message) -> bool:
    if message.recipient_id == user.id or message.sender_id == user.id:
        return True
    return message.recipient_id is None and user.is_back_office


def get_message(*, user, message_id: UUID) -> Message:
    try:
        message = Message.objects.select_related('sender', 'recipient').get(id=message_id)
    except Message.DoesNotExist:
        raise MessageNotFoundError("Message not found")
    if not (_can_access(user, message) or user.is_back_office):
        raise MessageNotFoundError("Message not found")
    return message


@transaction.atomic
def reply_to_message(*, user, message_id: UUID, content: str) -> Message:
    """
    Reply in a thread.

    The back office answers the original author (or the guest by
    email); a client reply goes to the back office.
    """
    parent = get_message(user=user, message_id=message_id)

    if user.is_back_office:
        recipient = parent.sender if parent.sender_id != user.id else parent.recipient
    else:
        if not _can_access(user, parent):
            raise MessagePermissionError("You cannot reply to this message")
        recipient = None

    subject = parent.subject if parent.subject.startswith('Re: ') else f"Re: {parent.subject}"
    reply = Message.objects.create(
        sender=user,
        recipient=recipient,
        guest_email=parent.guest_email if recipient is None and user.is_back_office else '',
        subject=subject[:200],
        content=content,
        type=parent.type,
        priority=parent.priority,
        parent=parent,
        order=parent.order,
    )
    if parent.status == MessageStatus.UNREAD and (parent.recipient_id == user.id or parent.recipient_id is None):
        parent.status = MessageStatus.READ
        parent.read_at = timezone.now()
        parent.save(update_fields=['status', 'read_at'])
    return reply


def _addressed_to(user, message: Message) -> bool:
    if message.recipient_id == user.id:
        return True
    return message.recipient_id is None and user.is_back_office


def mark_read(*, user, message_id: UUID) -> Message:
    message = get_message(user=user, message_id=message_id)
    if not _addressed_to(user, message):
        raise MessagePermissionError("Only the recipient can mark a message as read")
    if message.status == MessageStatus.UNREAD:
        message.status = MessageStatus.READ
        message.read_at = timezone.now()
        message.save(update_fields=['status', 'read_at'])
    return message


def archive_message(*, user, message_id: UUID) -> Message:
    message = get_message(user=user, message_id=message_id)
    if not _addressed_to(user, message):
        raise MessagePermissionError("Only the recipient can archive a message")
    message.status = MessageStatus.ARCHIVED
    message.read_at = message.read_at or timezone.now()
    message.save(update_fields=['status', 'read_at'])
    return message


def unread_count(user) -> int:
    queryset = Message.objects.filter(status=MessageStatus.UNREAD)
    if user.is_back_office:
        return queryset.filter(Q(recipient=user) | Q(recipient__isnull=True)).count()
    return queryset.filter(recipient=user).count()


def user_messages(user) -> QuerySet:
    """Messages a client sent or received, newest first."""
    return (
        Message.objects
        .filter(Q(recipient=user) | Q(sender=user))
        .exclude(status=MessageStatus.ARCHIVED, recipient=user)
        .select_related('sender', 'recipient')
    )


def admin_messages(
    *,
    status: Optional[str] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
    user_id: Optional[UUID] = None,
) -> QuerySet:
    """
    Back-office listing: unread first, then by priority (urgent first),
    then newest.
    """
    queryset = Message.objects.select_related('sender', 'recipient', 'order')
    if status:
        queryset = queryset.filter(status=status)
    if type:
        queryset = queryset.filter(type=type)
    if priority:
        queryset = queryset.filter(priority=priority)
    if user_id:
        queryset = queryset.filter(Q(sender_id=user_id) | Q(recipient_id=user_id))

    return queryset.annotate(
        unread_rank=Case(
            When(status=MessageStatus.UNREAD, then=Value(0)),
            default=Value(1),
            output_field=IntegerField(),
        ),
        priority_rank=Case(
            *[When(priority=p, then=Value(rank)) for p, rank in PRIORITY_RANK.items()],
            default=Value(4),
            output_field=IntegerField(),
        ),
    ).order_by('unread_rank', 'priority_rank', '-created_at')
