import logging
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from ..models import Task, TaskStatus, TaskType, TaskPriority
from .exceptions import TaskNotFoundError, TaskAssignmentError, InvalidTaskStateError

logger = logging.getLogger(__name__)

User = get_user_model()

UPDATABLE_FIELDS = ('title', 'description', 'priority', 'status', 'due_date', 'metadata')


def _assignee(user_id: Optional[UUID]):
    if user_id is None:
        return None
    user = User.objects.filter(id=user_id).first()
    if user is None or not user.is_back_office:
        raise TaskAssignmentError("Tasks can only be assigned to staff members")
    return user


@transaction.atomic
def create_task(
    *,
    title: str,
    created_by=None,
    description: str = '',
    type: str = TaskType.MANUAL,
    priority: str = TaskPriority.MEDIUM,
    due_date: Optional[datetime] = None,
    assigned_to_id: Optional[UUID] = None,
    related_user_id: Optional[UUID] = None,
    related_subscription_id: Optional[UUID] = None,
    related_account_id: Optional[UUID] = None,
    related_order_id: Optional[UUID] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Task:
    """
    Create a task by hand.

    Raises:
        TaskAssignmentError: Assignee unknown or not back office
    """
    task = Task.objects.create(
        title=title,
        description=description,
        type=type,
        priority=priority,
        due_date=due_date,
        assigned_to=_assignee(assigned_to_id),
        created_by=created_by,
        related_user_id=related_user_id,
        related_subscription_id=related_subscription_id,
        related_account_id=related_account_id,
        related_order_id=related_order_id,
        metadata=metadata or {},
    )
    logger.info("Task %s created: %s", task.id, title)
    return task


def _get_locked(task_id: UUID) -> Task:
    try:
        return Task.objects.select_for_update().get(id=task_id)
    except Task.DoesNotExist:
        raise TaskNotFoundError(f"Task {task_id} not found")


@transaction.atomic
def update_task(*, task_id: UUID, **fields: Any) -> Task:
    """
    Update a task. ``assigned_to_id`` may be given to (re)assign it;
    moving to COMPLETED stamps ``completed_at``.
    """
    task = _get_locked(task_id)

    if 'assigned_to_id' in fields:
        task.assigned_to = _assignee(fields.pop('assigned_to_id'))
    for name in UPDATABLE_FIELDS:
        if name in fields:
            setattr(task, name, fields[name])

    if task.status == TaskStatus.COMPLETED and task.completed_at is None:
        task.completed_at = timezone.now()
    elif task.status != TaskStatus.COMPLETED:
        task.completed_at = None
    task.save()
    return task


@transaction.atomic
def complete_task(*, task_id: UUID, user=None) -> Task:
    """
    Raises:
        InvalidTaskStateError: Task already completed or cancelled
    """
    task = _get_locked(task_id)
    if not task.is_open:
        raise InvalidTaskStateError(f"Task is already {task.status}")

    task.status = TaskStatus.COMPLETED
    task.completed_at = timezone.now()
    if task.assigned_to is None and user is not None:
        task.assigned_to = user
    task.save(update_fields=['status', 'completed_at', 'assigned_to', 'updated_at'])
    logger.info("Task %s completed", task.id)
    return task
