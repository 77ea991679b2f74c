"""Typed failures raised by the task hierarchy core.

Services raise these; command and query handlers translate them into
OperationResult failures. None of them is transient, so none is retried.
"""

from typing import Any


class TaskHierarchyError(Exception):
    """Base class for task hierarchy failures.

    Attributes:
        message: Human-readable error message
        error_code: Categorized error code for client handling
        details: Additional diagnostic details
    """

    error_code = "task_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class TaskNotFoundError(TaskHierarchyError):
    """A referenced task or parent does not exist or is soft-deleted."""

    error_code = "not_found"

    def __init__(self, task_id: str, role: str = "Task"):
        super().__init__(f"{role} with ID {task_id} not found", {"task_id": task_id})
        self.task_id = task_id


class TaskAccessDeniedError(TaskHierarchyError):
    """The acting owner does not own the task (or the parent)."""

    error_code = "unauthorized"

    def __init__(self, message: str = "You do not have permission to modify this task", task_id: str | None = None):
        super().__init__(message, {"task_id": task_id} if task_id else None)
        self.task_id = task_id


class TaskValidationError(TaskHierarchyError):
    """Invalid input: self-parent, circular reference, depth exceeded, bad paging, unknown sort key..."""

    error_code = "validation_error"


class HierarchyConsistencyError(TaskHierarchyError):
    """A cycle or an unbounded chain was found in stored data.

    This means the stored parent pointers violate the hierarchy invariants,
    not that the caller did something wrong.
    """

    error_code = "internal_consistency"
