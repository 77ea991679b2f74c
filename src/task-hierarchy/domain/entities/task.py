"""Task aggregate definition using the AggregateState pattern

    DomainEvents are appended/aggregated in the Task and the
    repository publishes them via Mediator after the Task was persisted!
."""

from datetime import datetime, timezone
from typing import Optional, cast
from uuid import uuid4

from multipledispatch import dispatch
from neuroglia.data.abstractions import AggregateRoot, AggregateState

from domain.enums import TaskPriority, TaskStatus, TaskType
from domain.events.task import (
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
from domain.exceptions import TaskValidationError
from domain.models.timestamps import as_utc

MAX_NAME_LENGTH = 200


def _validated_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise TaskValidationError("Task name is required")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise TaskValidationError(f"Task name cannot exceed {MAX_NAME_LENGTH} characters")
    return cleaned


def _validated_progress(progress: int) -> int:
    if progress < 0 or progress > 100:
        raise TaskValidationError("Progress must be between 0 and 100")
    return progress


class TaskState(AggregateState[str]):
    """Encapsulates the persisted state for the Task aggregate."""

    id: str
    name: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    task_type: TaskType
    progress: int
    due_date: Optional[datetime]
    owner_id: str
    parent_task_id: Optional[str]
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    def __init__(self) -> None:
        super().__init__()
        self.id = ""
        self.name = ""
        self.description = None
        self.status = TaskStatus.TODO
        self.priority = TaskPriority.MEDIUM
        self.task_type = TaskType.TASK
        self.progress = 0
        self.due_date = None
        self.owner_id = ""
        self.parent_task_id = None
        self.is_deleted = False

        now = datetime.now(timezone.utc)
        self.created_at = now
        self.updated_at = now

    @dispatch(TaskCreatedDomainEvent)
    def on(self, event: TaskCreatedDomainEvent) -> None:  # type: ignore[override]
        """Apply the creation event to the state."""
        self.id = event.aggregate_id
        self.name = event.name
        self.description = event.description
        self.status = event.status
        self.priority = event.priority
        self.task_type = event.task_type
        self.progress = event.progress
        self.due_date = event.due_date
        self.owner_id = event.owner_id
        self.parent_task_id = event.parent_task_id
        self.created_at = event.created_at
        self.updated_at = event.updated_at

    @dispatch(TaskNameUpdatedDomainEvent)
    def on(self, event: TaskNameUpdatedDomainEvent) -> None:  # type: ignore[override]
        """Apply the name updated event to the state."""
        self.name = event.new_name
        self.updated_at = datetime.now(timezone.utc)

    @dispatch(TaskDescriptionUpdatedDomainEvent)
    def on(self, event: TaskDescriptionUpdatedDomainEvent) -> None:  # type: ignore[override]
        """Apply the description updated event to the state"""
        self.description = event.new_description
        self.updated_at = datetime.now(timezone.utc)

    @dispatch(TaskStatusUpdatedDomainEvent)
    def on(self, event: TaskStatusUpdatedDomainEvent) -> None:  # type: ignore[override]
        """Apply the status updated event to the state."""
        self.status = event.new_status
        self.updated_at = datetime.now(timezone.utc)

    @dispatch(TaskPriorityUpdatedDomainEvent)
    def on(self, event: TaskPriorityUpdatedDomainEvent) -> None:  # type: ignore[override]
        """Apply the priority updated event to the state."""
        self.priority = event.new_priority
        self.updated_at = datetime.now(timezone.utc)

    @dispatch(TaskTypeUpdatedDomainEvent)
    def on(self, event: TaskTypeUpdatedDomainEvent) -> None:  # type: ignore[override]
        self.task_type = event.new_type
        self.updated_at = datetime.now(timezone.utc)

    @dispatch(TaskProgressUpdatedDomainEvent)
    def on(self, event: TaskProgressUpdatedDomainEvent) -> None:  # type: ignore[override]
        self.progress = event.new_progress
        self.updated_at = datetime.now(timezone.utc)

    @dispatch(TaskDueDateUpdatedDomainEvent)
    def on(self, event: TaskDueDateUpdatedDomainEvent) -> None:  # type: ignore[override]
        self.due_date = event.new_due_date
        self.updated_at = datetime.now(timezone.utc)

    @dispatch(TaskParentChangedDomainEvent)
    def on(self, event: TaskParentChangedDomainEvent) -> None:  # type: ignore[override]
        """Apply the parent change to the state (None promotes the task to a root)."""
        self.parent_task_id = event.new_parent_task_id
        self.updated_at = event.changed_at

    @dispatch(TaskDeletedDomainEvent)
    def on(self, event: TaskDeletedDomainEvent) -> None:  # type: ignore[override]
        """Apply the deleted event to the state (marks as deleted).

        Children are left untouched and keep their parent_task_id.
        """
        self.is_deleted = True
        self.updated_at = datetime.now(timezone.utc)


class Task(AggregateRoot[TaskState, str]):
    """Task aggregate root following the AggregateState pattern."""

    def __init__(
        self,
        name: str,
        owner_id: str,
        description: Optional[str] = None,
        status: TaskStatus = TaskStatus.TODO,
        priority: TaskPriority = TaskPriority.MEDIUM,
        task_type: TaskType = TaskType.TASK,
        progress: int = 0,
        due_date: Optional[datetime] = None,
        parent_task_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        task_id: Optional[str] = None,
    ) -> None:
        super().__init__()
        if not owner_id:
            raise TaskValidationError("Task owner is required")
        aggregate_id = task_id or str(uuid4())
        created_time = as_utc(created_at) or datetime.now(timezone.utc)
        updated_time = as_utc(updated_at) or created_time

        self.state.on(
            self.register_event(  # type: ignore
                TaskCreatedDomainEvent(
                    aggregate_id=aggregate_id,
                    name=_validated_name(name),
                    description=description,
                    status=status,
                    priority=priority,
                    task_type=task_type,
                    progress=_validated_progress(progress),
                    due_date=as_utc(due_date),
                    owner_id=owner_id,
                    parent_task_id=parent_task_id,
                    created_at=created_time,
                    updated_at=updated_time,
                )
            )
        )

    def id(self) -> str:
        """Return the aggregate identifier with a precise type."""

        aggregate_id = super().id()
        if aggregate_id is None:
            raise ValueError("Task aggregate identifier has not been initialized")
        return cast(str, aggregate_id)

    def update_name(self, new_name: str) -> bool:
        new_name = _validated_name(new_name)
        if self.state.name == new_name:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskNameUpdatedDomainEvent(
                    aggregate_id=self.id(),
                    new_name=new_name,
                )
            )
        )
        return True

    def update_description(self, new_description: Optional[str]) -> bool:
        if self.state.description == new_description:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskDescriptionUpdatedDomainEvent(
                    aggregate_id=self.id(),
                    new_description=new_description,
                )
            )
        )
        return True

    def update_status(self, new_status: TaskStatus) -> bool:
        if self.state.status == new_status:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskStatusUpdatedDomainEvent(
                    aggregate_id=self.id(),
                    new_status=new_status,
                )
            )
        )
        return True

    def update_priority(self, new_priority: TaskPriority) -> bool:
        if self.state.priority == new_priority:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskPriorityUpdatedDomainEvent(
                    aggregate_id=self.id(),
                    new_priority=new_priority,
                )
            )
        )
        return True

    def update_type(self, new_type: TaskType) -> bool:
        if self.state.task_type == new_type:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskTypeUpdatedDomainEvent(
                    aggregate_id=self.id(),
                    new_type=new_type,
                )
            )
        )
        return True

    def update_progress(self, new_progress: int) -> bool:
        new_progress = _validated_progress(new_progress)
        if self.state.progress == new_progress:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskProgressUpdatedDomainEvent(
                    aggregate_id=self.id(),
                    new_progress=new_progress,
                )
            )
        )
        return True

    def update_due_date(self, new_due_date: Optional[datetime]) -> bool:
        """Change the due date; a naive value is taken to be UTC."""
        new_due_date = as_utc(new_due_date)
        if self.state.due_date == new_due_date:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskDueDateUpdatedDomainEvent(
                    aggregate_id=self.id(),
                    new_due_date=new_due_date,
                )
            )
        )
        return True

    def set_parent(self, new_parent_task_id: str) -> bool:
        """Point this task at a new parent.

        Only the field mutation happens here; acyclicity, depth and ownership
        are checked by TaskHierarchyGuard before this is called.
        """
        if new_parent_task_id == self.id():
            raise TaskValidationError("A task cannot be its own parent (self-parent)")
        return self._change_parent(new_parent_task_id)

    def clear_parent(self) -> bool:
        """Promote this task to a root."""
        return self._change_parent(None)

    def _change_parent(self, new_parent_task_id: Optional[str]) -> bool:
        if self.state.parent_task_id == new_parent_task_id:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskParentChangedDomainEvent(
                    aggregate_id=self.id(),
                    old_parent_task_id=self.state.parent_task_id,
                    new_parent_task_id=new_parent_task_id,
                    changed_at=datetime.now(timezone.utc),
                )
            )
        )
        return True

    def mark_as_deleted(self, deleted_by: Optional[str] = None) -> bool:
        """Soft-delete the task by registering a deletion event.

        Args:
            deleted_by: User ID or identifier of who deleted the task

        Returns:
            False when the task was already deleted
        """
        if self.state.is_deleted:
            return False
        self.state.on(
            self.register_event(  # type: ignore
                TaskDeletedDomainEvent(
                    aggregate_id=self.id(),
                    name=self.state.name,
                    deleted_by=deleted_by,
                )
            )
        )
        return True
