"""Services for back-office tasks and their automatic generation."""

from .exceptions import (
    TasksServiceError,
    TaskNotFoundError,
    TaskAssignmentError,
    InvalidTaskStateError,
)
from .task_management import create_task, update_task, complete_task
from .task_generation import (
    generate_subscription_expiry_tasks,
    generate_account_recharge_tasks,
    generate_payment_reminder_tasks,
    generate_all_tasks,
)

__all__ = [
    # Exceptions
    'TasksServiceError',
    'TaskNotFoundError',
    'TaskAssignmentError',
    'InvalidTaskStateError',
    # Management
    'create_task',
    'update_task',
    'complete_task',
    # Generation
    'generate_subscription_expiry_tasks',
    'generate_account_recharge_tasks',
    'generate_payment_reminder_tasks',
    'generate_all_tasks',
]
