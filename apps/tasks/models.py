import uuid
from django.conf import settings
from django.db import models


class TaskType(models.TextChoices):
    SUBSCRIPTION_EXPIRY = 'SUBSCRIPTION_EXPIRY', 'Subscription expiry'
    ACCOUNT_RECHARGE = 'ACCOUNT_RECHARGE', 'Account recharge'
    PAYMENT_REMINDER = 'PAYMENT_REMINDER', 'Payment reminder'
    MANUAL = 'MANUAL', 'Manual'


class TaskPriority(models.TextChoices):
    LOW = 'LOW', 'Low'
    MEDIUM = 'MEDIUM', 'Medium'
    HIGH = 'HIGH', 'High'
    URGENT = 'URGENT', 'Urgent'


class TaskStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    IN_PROGRESS = 'IN_PROGRESS', 'In progress'
    COMPLETED = 'COMPLETED', 'Completed'
    CANCELLED = 'CANCELLED', 'Cancelled'


OPEN_TASK_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)


class Task(models.Model):
    """Back-office to-do, created by hand or by the task generators."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=TaskType.choices, default=TaskType.MANUAL)
    priority = models.CharField(max_length=10, choices=TaskPriority.choices, default=TaskPriority.MEDIUM)
    status = models.CharField(max_length=12, choices=TaskStatus.choices, default=TaskStatus.PENDING)
    due_date = models.DateTimeField(null=True, blank=True)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_tasks'
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_tasks'
    )
    related_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='related_tasks'
    )
    related_subscription = models.ForeignKey(
        'streaming.Subscription',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='tasks'
    )
    related_account = models.ForeignKey(
        'streaming.StreamingAccount',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='tasks'
    )
    related_order = models.ForeignKey(
        'orders.Order',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='tasks'
    )
    metadata = models.JSONField(default=dict, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tasks'
        ordering = ['status', 'due_date', '-created_at']
        indexes = [
            models.Index(fields=['status', 'priority']),
            models.Index(fields=['type', 'status']),
            models.Index(fields=['due_date']),
        ]

    def __str__(self):
        return self.title

    @property
    def is_open(self):
        return self.status in OPEN_TASK_STATUSES
