import datetime
from dataclasses import dataclass, field

from neuroglia.data.abstractions import Identifiable, queryable

from domain.enums import TaskPriority, TaskStatus, TaskType


@queryable
@dataclass
class TaskDto(Identifiable[str]):
    id: str
    name: str
    status: TaskStatus
    priority: TaskPriority
    task_type: TaskType
    owner_id: str
    description: str | None = None
    progress: int = 0
    parent_task_id: str | None = None
    due_date: datetime.datetime | None = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None
    direct_logged_minutes: int = 0
    children_logged_minutes: int = 0
    total_logged_minutes: int = 0
    assignee_ids: list[str] = field(default_factory=list)
