import pytest
import uuid
from apps.messaging.models import MessageStatus, MessageType
from apps.messaging.services import (
    send_admin_message,
    send_contact_message,
    notify_user,
    reply_to_message,
    mark_read,
    archive_message,
    unread_count,
    admin_messages,
    InvalidRecipientError,
    RecipientNotFoundError,
    MessagePermissionError,
    MessageNotFoundError,
)


@pytest.mark.django_db
class TestSending:

    def test_admin_message(self, staff_user, user):
        message = send_admin_message(
            sender=staff_user, recipient_id=user.id, subject='Bonjour', content='Votre colis est prêt'
        )

        assert message.recipient == user
        assert message.status == MessageStatus.UNREAD

    def test_cannot_message_self(self, staff_user):
        with pytest.raises(InvalidRecipientError):
            send_admin_message(sender=staff_user, recipient_id=staff_user.id, subject='x', content='x')

    def test_unknown_recipient(self, staff_user):
        with pytest.raises(RecipientNotFoundError):
            send_admin_message(sender=staff_user, recipient_id=uuid.uuid4(), subject='x', content='x')

    def test_contact_message_goes_to_admins(self, db):
        message = send_contact_message(name='Rakoto', email='rakoto@example.com', subject='Info', content='?')

        assert message.sender is None
        assert message.recipient is None
        assert message.type == MessageType.SUPPORT


@pytest.mark.django_db
class TestInbox:

    def test_unread_count(self, user, staff_user, client_message):
        notify_user(user=user, subject='Commande', content='Payée')

        assert unread_count(user) == 1
        assert unread_count(staff_user) == 1

    def test_admin_listing_order(self, inbox):
        subjects = [m.subject for m in admin_messages()]

        assert subjects == ['Non lu haut', 'Non lu bas', 'Lu urgent']

    def test_admin_listing_filters(self, inbox, other_user):
        assert admin_messages(status=MessageStatus.READ).count() == 1
        assert admin_messages(user_id=other_user.id).count() == 1

    def test_reply_by_staff_reaches_author(self, staff_user, user, client_message):
        reply = reply_to_message(user=staff_user, message_id=client_message.id, content='Nous regardons')

        client_message.refresh_from_db()
        assert reply.recipient == user
        assert reply.subject == 'Re: Problème de commande'
        assert client_message.status == MessageStatus.READ

    def test_client_cannot_mark_foreign_message(self, other_user, user):
        message = notify_user(user=user, subject='x', content='x')

        with pytest.raises(MessageNotFoundError):
            mark_read(user=other_user, message_id=message.id)

    def test_sender_cannot_archive(self, user, client_message):
        with pytest.raises(MessagePermissionError):
            archive_message(user=user, message_id=client_message.id)

    def test_mark_read_sets_timestamp(self, user):
        message = notify_user(user=user, subject='x', content='x')

        message = mark_read(user=user, message_id=message.id)

        assert message.status == MessageStatus.READ
        assert message.read_at is not None
