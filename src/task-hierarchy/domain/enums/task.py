"""Task-related enumerations.

These enums are used by the Task aggregate and by the query engine for
filtering and sorting.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Status values for Task aggregate."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    WAITING = "waiting"
    DONE = "done"

    @property
    def ordinal(self) -> int:
        return list(TaskStatus).index(self)


class TaskPriority(str, Enum):
    """Priority levels for Task aggregate."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def ordinal(self) -> int:
        return list(TaskPriority).index(self)


class TaskType(str, Enum):
    """Kind of node a task represents in the hierarchy."""

    PROJECT = "project"
    MILESTONE = "milestone"
    TASK = "task"


class EntryType(str, Enum):
    """How a time entry was logged."""

    TIMER = "timer"
    MANUAL = "manual"


class TaskSortField(str, Enum):
    """Whitelisted sort keys for task queries."""

    NAME = "name"
    CREATED_DATE = "createdDate"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    STATUS = "status"
    LOGGED_MINUTES = "loggedMinutes"

    @classmethod
    def parse(cls, value: str) -> "TaskSortField":
        """Resolve a sort key case-insensitively, raising ValueError for unknown keys."""
        normalized = value.strip().lower()
        for field in cls:
            if field.value.lower() == normalized:
                return field
        raise ValueError(value)


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"
