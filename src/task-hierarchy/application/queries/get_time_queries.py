"""Logged-time rollup and timeline queries."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Query, QueryHandler
from neuroglia.observability.tracing import add_span_attributes

from application.commands.command_handler_base import TaskHandlerBase
from application.services import TaskTimeAggregator
from domain.enums import TaskPriority, TaskStatus
from domain.exceptions import TaskAccessDeniedError, TaskHierarchyError
from domain.models import TaskTimeRollup, TimelineQuery, parse_enum
from domain.repositories import TaskRepository
from integration.models import TimelineTaskDto


@dataclass
class GetTaskTimeRollupsQuery(Query[OperationResult[dict[str, TaskTimeRollup]]]):
    """Query to compute logged-time rollups for the subtrees of the given tasks.

    Unknown or deleted task ids are skipped; the result covers every task of
    the expanded subtrees.
    """

    task_ids: list[str] = field(default_factory=list)
    user_info: dict[str, Any] | None = None


class GetTaskTimeRollupsQueryHandler(TaskHandlerBase, QueryHandler[GetTaskTimeRollupsQuery, OperationResult[dict[str, TaskTimeRollup]]]):
    def __init__(self, task_repository: TaskRepository, aggregator: TaskTimeAggregator):
        super().__init__()
        self.task_repository = task_repository
        self.aggregator = aggregator

    async def handle_async(self, request: GetTaskTimeRollupsQuery) -> OperationResult[dict[str, TaskTimeRollup]]:
        query = request
        add_span_attributes({"rollup.requested_count": len(query.task_ids)})
        owner_id = self._get_owner_id(query.user_info)
        if not owner_id:
            return self.missing_owner()

        try:
            for task_id in query.task_ids:
                task = await self.task_repository.get_async(task_id)
                if task is not None and not task.state.is_deleted and task.state.owner_id != owner_id:
                    raise TaskAccessDeniedError(f"You do not have access to task {task_id}", task_id=task_id)
            return self.ok(await self.aggregator.rollup_async(query.task_ids))
        except TaskHierarchyError as e:
            return self.failure_from(e)


@dataclass
class GetTimelineTasksQuery(Query[OperationResult[list[TimelineTaskDto]]]):
    """Query to retrieve the tasks due inside a date window, for Gantt rendering."""

    start_date: datetime
    end_date: datetime
    assignee_id: str | None = None
    status: str | None = None
    priority: str | None = None
    user_info: dict[str, Any] | None = None


class GetTimelineTasksQueryHandler(TaskHandlerBase, QueryHandler[GetTimelineTasksQuery, OperationResult[list[TimelineTaskDto]]]):
    def __init__(self, aggregator: TaskTimeAggregator):
        super().__init__()
        self.aggregator = aggregator

    async def handle_async(self, request: GetTimelineTasksQuery) -> OperationResult[list[TimelineTaskDto]]:
        query = request
        add_span_attributes(
            {
                "timeline.start_date": query.start_date.isoformat(),
                "timeline.end_date": query.end_date.isoformat(),
            }
        )
        owner_id = self._get_owner_id(query.user_info)
        if not owner_id:
            return self.missing_owner()

        try:
            timeline_query = TimelineQuery(
                start_date=query.start_date,
                end_date=query.end_date,
                assignee_id=query.assignee_id,
                status=parse_enum(TaskStatus, query.status, "status") if query.status else None,
                priority=parse_enum(TaskPriority, query.priority, "priority") if query.priority else None,
            )
            return self.ok(await self.aggregator.get_timeline_async(owner_id, timeline_query))
        except TaskHierarchyError as e:
            return self.failure_from(e)
