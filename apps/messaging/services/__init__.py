"""Services for administrative messages and notifications."""

from .exceptions import (
    MessagingServiceError,
    RecipientNotFoundError,
    InvalidRecipientError,
    MessageNotFoundError,
    MessagePermissionError,
)
from .message_management import (
    send_admin_message,
    send_contact_message,
    client_message_to_admins,
    notify_user,
    get_message,
    reply_to_message,
    mark_read,
    archive_message,
    unread_count,
    user_messages,
    admin_messages,
)

__all__ = [
    # Exceptions
    'MessagingServiceError',
    'RecipientNotFoundError',
    'InvalidRecipientError',
    'MessageNotFoundError',
    'MessagePermissionError',
    # Services
    'send_admin_message',
    'send_contact_message',
    'client_message_to_admins',
    'notify_user',
    'get_message',
    'reply_to_message',
    'mark_read',
    'archive_message',
    'unread_count',
    'user_messages',
    'admin_messages',
]
