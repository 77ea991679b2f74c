"""Test fixtures package."""

from .factories import (
    DEFAULT_OWNER_ID,
    TaskAssignmentFactory,
    TaskFactory,
    TimeEntryFactory,
    UserInfoFactory,
)
from .repositories import TransactionRecordingTaskRepository, YieldingTaskRepository

__all__ = [
    "DEFAULT_OWNER_ID",
    "TaskAssignmentFactory",
    "TaskFactory",
    "TimeEntryFactory",
    "TransactionRecordingTaskRepository",
    "UserInfoFactory",
    "YieldingTaskRepository",
]
