import pytest
from apps.messaging.models import Message, MessagePriority, MessageStatus


@pytest.fixture
def client_message(user):
    return Message.objects.create(sender=user, subject='Problème de commande', content='Bonjour, ...')


@pytest.fixture
def inbox(user, other_user):
    """Admin inbox with mixed status and priority."""
    return {
        'read_urgent': Message.objects.create(
            sender=user, subject='Lu urgent', content='.', priority=MessagePriority.URGENT, status=MessageStatus.READ
        ),
        'unread_low': Message.objects.create(
            sender=other_user, subject='Non lu bas', content='.', priority=MessagePriority.LOW
        ),
        'unread_high': Message.objects.create(
            sender=user, subject='Non lu haut', content='.', priority=MessagePriority.HIGH
        ),
    }
