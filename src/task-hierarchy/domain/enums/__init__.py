"""Domain enumerations package.

This package contains all enumerations used across the domain layer.
"""

from .task import EntryType, SortOrder, TaskPriority, TaskSortField, TaskStatus, TaskType

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "TaskType",
    "EntryType",
    "TaskSortField",
    "SortOrder",
]
