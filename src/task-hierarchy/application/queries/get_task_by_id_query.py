"""Get task by ID query with handler."""

from dataclasses import dataclass
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Query, QueryHandler

from application.commands.command_handler_base import TaskHandlerBase
from application.mapping import to_task_dto
from application.services import TaskHierarchyNavigator, TaskTimeAggregator
from domain.exceptions import TaskHierarchyError
from domain.repositories import TaskRepository
from integration.models import TaskDto


@dataclass
class GetTaskByIdQuery(Query[OperationResult[TaskDto]]):
    """Query to retrieve one task with its logged-time rollup and assignees."""

    task_id: str
    user_info: dict[str, Any] | None = None


class GetTaskByIdQueryHandler(TaskHandlerBase, QueryHandler[GetTaskByIdQuery, OperationResult[TaskDto]]):
    """Handle single task retrieval with ownership checks."""

    def __init__(self, task_repository: TaskRepository, navigator: TaskHierarchyNavigator, aggregator: TaskTimeAggregator):
        super().__init__()
        self.task_repository = task_repository
        self.navigator = navigator
        self.aggregator = aggregator

    async def handle_async(self, request: GetTaskByIdQuery) -> OperationResult[TaskDto]:
        query = request
        owner_id = self._get_owner_id(query.user_info)
        if not owner_id:
            return self.missing_owner()

        try:
            task = await self.navigator.get_task_async(query.task_id, owner_id)
            rollups = await self.aggregator.rollup_async([task.id()])
        except TaskHierarchyError as e:
            return self.failure_from(e)

        assignments = await self.task_repository.get_assignments_async([task.id()])
        return self.ok(to_task_dto(task, rollups.get(task.id()), assignments.get(task.id(), [])))
