"""
Domain exceptions for task services.

Exception Hierarchy:
    TasksServiceError (base)
    ├── TaskNotFoundError
    ├── TaskAssignmentError
    └── InvalidTaskStateError
"""


class TasksServiceError(Exception):
    """Base exception for task services."""
    pass


class TaskNotFoundError(TasksServiceError):
    pass


class TaskAssignmentError(TasksServiceError):
    """Raised when a task is assigned to someone outside the back office."""
    pass


class InvalidTaskStateError(TasksServiceError):
    pass
