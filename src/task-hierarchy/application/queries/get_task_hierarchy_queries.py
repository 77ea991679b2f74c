"""Hierarchy traversal queries: children, ancestors and descendants of a task."""

from dataclasses import dataclass
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Query, QueryHandler
from neuroglia.observability.tracing import add_span_attributes

from application.commands.command_handler_base import TaskHandlerBase
from application.mapping import to_task_dto
from application.services import TaskHierarchyNavigator, TaskTimeAggregator
from domain.exceptions import TaskHierarchyError
from domain.repositories import TaskRepository
from integration.models import TaskDto, TaskHierarchyDto


@dataclass
class GetTaskChildrenQuery(Query[OperationResult[list[TaskDto]]]):
    """Query to retrieve the direct children of a task, oldest first."""

    task_id: str
    user_info: dict[str, Any] | None = None


class GetTaskChildrenQueryHandler(TaskHandlerBase, QueryHandler[GetTaskChildrenQuery, OperationResult[list[TaskDto]]]):
    def __init__(self, task_repository: TaskRepository, navigator: TaskHierarchyNavigator, aggregator: TaskTimeAggregator):
        super().__init__()
        self.task_repository = task_repository
        self.navigator = navigator
        self.aggregator = aggregator

    async def handle_async(self, request: GetTaskChildrenQuery) -> OperationResult[list[TaskDto]]:
        query = request
        add_span_attributes({"task.id": query.task_id})
        owner_id = self._get_owner_id(query.user_info)
        if not owner_id:
            return self.missing_owner()

        try:
            children = await self.navigator.get_children_async(query.task_id, owner_id)
            child_ids = [child.id() for child in children]
            rollups = await self.aggregator.rollup_async(child_ids)
        except TaskHierarchyError as e:
            return self.failure_from(e)

        assignments = await self.task_repository.get_assignments_async(child_ids)
        return self.ok([to_task_dto(child, rollups.get(child.id()), assignments.get(child.id(), [])) for child in children])


@dataclass
class GetTaskAncestorsQuery(Query[OperationResult[list[TaskHierarchyDto]]]):
    """Query to retrieve the ancestor chain of a task, root first."""

    task_id: str
    user_info: dict[str, Any] | None = None


class GetTaskAncestorsQueryHandler(TaskHandlerBase, QueryHandler[GetTaskAncestorsQuery, OperationResult[list[TaskHierarchyDto]]]):
    def __init__(self, navigator: TaskHierarchyNavigator):
        super().__init__()
        self.navigator = navigator

    async def handle_async(self, request: GetTaskAncestorsQuery) -> OperationResult[list[TaskHierarchyDto]]:
        query = request
        add_span_attributes({"task.id": query.task_id})
        owner_id = self._get_owner_id(query.user_info)
        if not owner_id:
            return self.missing_owner()

        try:
            return self.ok(await self.navigator.get_ancestors_async(query.task_id, owner_id))
        except TaskHierarchyError as e:
            return self.failure_from(e)


@dataclass
class GetTaskDescendantsQuery(Query[OperationResult[list[TaskHierarchyDto]]]):
    """Query to retrieve every descendant of a task with its relative depth."""

    task_id: str
    user_info: dict[str, Any] | None = None


class GetTaskDescendantsQueryHandler(TaskHandlerBase, QueryHandler[GetTaskDescendantsQuery, OperationResult[list[TaskHierarchyDto]]]):
    def __init__(self, navigator: TaskHierarchyNavigator):
        super().__init__()
        self.navigator = navigator

    async def handle_async(self, request: GetTaskDescendantsQuery) -> OperationResult[list[TaskHierarchyDto]]:
        query = request
        add_span_attributes({"task.id": query.task_id})
        owner_id = self._get_owner_id(query.user_info)
        if not owner_id:
            return self.missing_owner()

        try:
            return self.ok(await self.navigator.get_descendants_async(query.task_id, owner_id))
        except TaskHierarchyError as e:
            return self.failure_from(e)
