import datetime
from dataclasses import dataclass, field

from domain.enums import TaskPriority, TaskStatus, TaskType


@dataclass
class TimelineTaskDto:
    """Minimal task projection for timeline (Gantt) rendering.

    duration is expressed in whole days; a task starting and ending on the
    same day has a duration of 0.
    """

    id: str
    name: str
    start_date: datetime.datetime
    end_date: datetime.datetime
    duration: int
    status: TaskStatus
    priority: TaskPriority
    task_type: TaskType
    progress: int = 0
    parent_task_id: str | None = None
    assignee_ids: list[str] = field(default_factory=list)
