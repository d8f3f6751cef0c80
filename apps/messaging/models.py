from django.conf import settings
from django.db import models
import uuid


class MessageType(models.TextChoices):
    GENERAL = 'GENERAL', 'General'
    ORDER = 'ORDER', 'Order'
    QUOTE = 'QUOTE', 'Quote'
    SUBSCRIPTION = 'SUBSCRIPTION', 'Subscription'
    SUPPORT = 'SUPPORT', 'Support'
    PROMOTION = 'PROMOTION', 'Promotion'


class MessagePriority(models.TextChoices):
    LOW = 'LOW', 'Low'
    NORMAL = 'NORMAL', 'Normal'
    HIGH = 'HIGH', 'High'
    URGENT = 'URGENT', 'Urgent'


class MessageStatus(models.TextChoices):
    UNREAD = 'UNREAD', 'Unread'
    READ = 'READ', 'Read'
    ARCHIVED = 'ARCHIVED', 'Archived'


class Message(models.Model):
    """
    Administrative message or notification.

    A null ``sender`` is a system notification or a guest contact form;
    a null ``recipient`` addresses the back-office team.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sent_messages'
    )
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='received_messages'
    )
    guest_name = models.CharField(max_length=150, blank=True)
    guest_email = models.EmailField(blank=True)
    guest_phone = models.CharField(max_length=20, blank=True)
    subject = models.CharField(max_length=200)
    content = models.TextField()
    type = models.CharField(max_length=15, choices=MessageType.choices, default=MessageType.GENERAL)
    priority = models.CharField(max_length=10, choices=MessagePriority.choices, default=MessagePriority.NORMAL)
    status = models.CharField(max_length=10, choices=MessageStatus.choices, default=MessageStatus.UNREAD)
    parent = models.ForeignKey('self', on_delete=models.CASCADE, null=True, blank=True, related_name='replies')
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='messages'
    )
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'messages'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'status']),
            models.Index(fields=['status', 'priority']),
        ]

    def __str__(self):
        return self.subject
