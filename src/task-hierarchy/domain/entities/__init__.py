"""Domain entities package.

Contains the aggregate roots of the task hierarchy domain.
"""

from .task import Task, TaskState

__all__ = [
    "Task",
    "TaskState",
]
