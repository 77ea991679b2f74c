"""Domain events package."""

from .task import (
    TaskCreatedDomainEvent,
    TaskDeletedDomainEvent,
    TaskDescriptionUpdatedDomainEvent,
    TaskDueDateUpdatedDomainEvent,
    TaskNameUpdatedDomainEvent,
    TaskParentChangedDomainEvent,
    TaskPriorityUpdatedDomainEvent,
    TaskProgressUpdatedDomainEvent,
    TaskStatusUpdatedDomainEvent,
    TaskTypeUpdatedDomainEvent,
)

__all__ = [
    "TaskCreatedDomainEvent",
    "TaskNameUpdatedDomainEvent",
    "TaskDescriptionUpdatedDomainEvent",
    "TaskStatusUpdatedDomainEvent",
    "TaskPriorityUpdatedDomainEvent",
    "TaskTypeUpdatedDomainEvent",
    "TaskProgressUpdatedDomainEvent",
    "TaskDueDateUpdatedDomainEvent",
    "TaskParentChangedDomainEvent",
    "TaskDeletedDomainEvent",
]
