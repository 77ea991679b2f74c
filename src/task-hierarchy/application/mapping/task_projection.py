"""Projection of Task aggregates onto the TaskDto read model."""

from collections.abc import Iterable

from domain.entities import Task
from domain.models import TaskAssignment, TaskTimeRollup
from integration.models import TaskDto


def to_task_dto(task: Task, rollup: TaskTimeRollup | None = None, assignments: Iterable[TaskAssignment] = ()) -> TaskDto:
    """Build the TaskDto of a task, with its logged-time rollup and active assignees."""
    state = task.state
    rollup = rollup or TaskTimeRollup(task_id=task.id())
    return TaskDto(
        id=task.id(),
        name=state.name,
        status=state.status,
        priority=state.priority,
        task_type=state.task_type,
        owner_id=state.owner_id,
        description=state.description,
        progress=state.progress,
        parent_task_id=state.parent_task_id,
        due_date=state.due_date,
        created_at=state.created_at,
        updated_at=state.updated_at,
        direct_logged_minutes=rollup.direct,
        children_logged_minutes=rollup.children_total,
        total_logged_minutes=rollup.total,
        assignee_ids=[a.user_id for a in assignments if a.is_active],
    )
