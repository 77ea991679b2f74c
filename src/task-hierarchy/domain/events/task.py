"""Domain events for Task aggregate operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from neuroglia.data.abstractions import DomainEvent
from neuroglia.eventing.cloud_events.decorators import cloudevent

from domain.enums import TaskPriority, TaskStatus, TaskType


@cloudevent("task.created.v1")
@dataclass
class TaskCreatedDomainEvent(DomainEvent):
    """Event raised when a new task aggregate is created."""

    aggregate_id: str
    name: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    task_type: TaskType
    progress: int
    due_date: Optional[datetime]
    owner_id: str
    parent_task_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    def __init__(
        self,
        aggregate_id: str,
        name: str,
        description: Optional[str],
        status: TaskStatus,
        priority: TaskPriority,
        task_type: TaskType,
        progress: int,
        due_date: Optional[datetime],
        owner_id: str,
        parent_task_id: Optional[str],
        created_at: datetime,
        updated_at: datetime,
    ) -> None:
        super().__init__(aggregate_id)
        self.aggregate_id = aggregate_id
        self.name = name
        self.description = description
        self.status = status
        self.priority = priority
        self.task_type = task_type
        self.progress = progress
        self.due_date = due_date
        self.owner_id = owner_id
        self.parent_task_id = parent_task_id
        self.created_at = created_at
        self.updated_at = updated_at


@cloudevent("task.name.updated.v1")
@dataclass
class TaskNameUpdatedDomainEvent(DomainEvent):
    """Event raised when an existing task's name is updated."""

    def __init__(
        self,
        aggregate_id: str,
        new_name: str,
    ):
        super().__init__(aggregate_id)
        self.new_name = new_name

    aggregate_id: str
    new_name: str


@cloudevent("task.description.updated.v1")
@dataclass
class TaskDescriptionUpdatedDomainEvent(DomainEvent):
    """Event raised when an existing task's description is updated."""

    def __init__(
        self,
        aggregate_id: str,
        new_description: Optional[str],
    ):
        super().__init__(aggregate_id)
        self.new_description = new_description

    aggregate_id: str
    new_description: Optional[str]


@cloudevent("task.status.updated.v1")
@dataclass
class TaskStatusUpdatedDomainEvent(DomainEvent):
    """Event raised when an existing task's status is updated."""

    def __init__(
        self,
        aggregate_id: str,
        new_status: TaskStatus,
    ):
        super().__init__(aggregate_id)
        self.new_status = new_status

    aggregate_id: str
    new_status: TaskStatus


@cloudevent("task.priority.updated.v1")
@dataclass
class TaskPriorityUpdatedDomainEvent(DomainEvent):
    """Event raised when an existing task's priority is updated."""

    def __init__(
        self,
        aggregate_id: str,
        new_priority: TaskPriority,
    ):
        super().__init__(aggregate_id)
        self.new_priority = new_priority

    aggregate_id: str
    new_priority: TaskPriority


@cloudevent("task.type.updated.v1")
@dataclass
class TaskTypeUpdatedDomainEvent(DomainEvent):
    """Event raised when an existing task's type is updated."""

    def __init__(
        self,
        aggregate_id: str,
        new_type: TaskType,
    ):
        super().__init__(aggregate_id)
        self.new_type = new_type

    aggregate_id: str
    new_type: TaskType


@cloudevent("task.progress.updated.v1")
@dataclass
class TaskProgressUpdatedDomainEvent(DomainEvent):
    """Event raised when an existing task's progress is updated."""

    def __init__(
        self,
        aggregate_id: str,
        new_progress: int,
    ):
        super().__init__(aggregate_id)
        self.new_progress = new_progress

    aggregate_id: str
    new_progress: int


@cloudevent("task.due_date.updated.v1")
@dataclass
class TaskDueDateUpdatedDomainEvent(DomainEvent):
    """Event raised when an existing task's due date is set or cleared."""

    def __init__(
        self,
        aggregate_id: str,
        new_due_date: Optional[datetime],
    ):
        super().__init__(aggregate_id)
        self.new_due_date = new_due_date

    aggregate_id: str
    new_due_date: Optional[datetime]


@cloudevent("task.parent.changed.v1")
@dataclass
class TaskParentChangedDomainEvent(DomainEvent):
    """Event raised when a task is re-parented or promoted to a root.

    A None new_parent_task_id means the task became a root.
    """

    def __init__(
        self,
        aggregate_id: str,
        old_parent_task_id: Optional[str],
        new_parent_task_id: Optional[str],
        changed_at: datetime,
    ):
        super().__init__(aggregate_id)
        self.old_parent_task_id = old_parent_task_id
        self.new_parent_task_id = new_parent_task_id
        self.changed_at = changed_at

    aggregate_id: str
    old_parent_task_id: Optional[str]
    new_parent_task_id: Optional[str]
    changed_at: datetime


@cloudevent("task.deleted.v1")
@dataclass
class TaskDeletedDomainEvent(DomainEvent):
    """Event raised when a task is soft-deleted."""

    def __init__(
        self,
        aggregate_id: str,
        name: str,
        deleted_by: Optional[str] = None,
    ):
        super().__init__(aggregate_id)
        self.name = name
        self.deleted_by = deleted_by

    aggregate_id: str
    name: str
    deleted_by: Optional[str]
