"""Get tasks query with handler: filtered, sorted and paginated task lists."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Query, QueryHandler
from neuroglia.observability.tracing import add_span_attributes

from application.commands.command_handler_base import TaskHandlerBase
from application.mapping import to_task_dto
from application.services import TaskQueryEngine, TaskTimeAggregator
from application.settings import app_settings
from domain.exceptions import TaskHierarchyError
from domain.models import PagedResult, TaskQuerySpecification
from domain.repositories import TaskRepository
from integration.models import TaskDto


@dataclass
class GetTasksQuery(Query[OperationResult[PagedResult[TaskDto]]]):
    """Query to retrieve one page of the caller's tasks.

    Filter values are raw strings as received from the caller; unknown
    values, sort keys or sort orders fail validation.
    """

    user_info: dict[str, Any] | None = None
    statuses: list[str] = field(default_factory=list)
    priorities: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    assignee_ids: list[str] = field(default_factory=list)
    due_date_from: datetime | None = None
    due_date_to: datetime | None = None
    search_term: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None
    page: int = 1
    page_size: int | None = None


class GetTasksQueryHandler(TaskHandlerBase, QueryHandler[GetTasksQuery, OperationResult[PagedResult[TaskDto]]]):
    """Handle task list queries.

    Each task of the page is enriched with its logged-time rollup (whole
    subtree) and its active assignees.
    """

    def __init__(self, task_repository: TaskRepository, query_engine: TaskQueryEngine, aggregator: TaskTimeAggregator):
        super().__init__()
        self.task_repository = task_repository
        self.query_engine = query_engine
        self.aggregator = aggregator

    async def handle_async(self, request: GetTasksQuery) -> OperationResult[PagedResult[TaskDto]]:
        query = request
        owner_id = self._get_owner_id(query.user_info)
        if not owner_id:
            return self.missing_owner()

        try:
            spec = TaskQuerySpecification.from_request(
                statuses=query.statuses,
                priorities=query.priorities,
                types=query.types,
                assignee_ids=query.assignee_ids,
                due_date_from=query.due_date_from,
                due_date_to=query.due_date_to,
                search_term=query.search_term,
                sort_by=query.sort_by,
                sort_order=query.sort_order,
                page=query.page,
                page_size=app_settings.default_page_size if query.page_size is None else query.page_size,
            )
            add_span_attributes(
                {
                    "query.sort_by": spec.sort_by.value,
                    "query.page": spec.page,
                    "query.page_size": spec.page_size,
                }
            )
            page = await self.query_engine.query_async(owner_id, spec)
            task_ids = [task.id() for task in page.items]
            rollups = await self.aggregator.rollup_async(task_ids)
        except TaskHierarchyError as e:
            return self.failure_from(e)

        assignments = await self.task_repository.get_assignments_async(task_ids)
        return self.ok(page.map(lambda task: to_task_dto(task, rollups.get(task.id()), assignments.get(task.id(), []))))
