"""Hierarchy guard service.

Validates and applies parent-pointer changes. All checks and the mutation
run inside TaskRepository.hierarchy_transaction(owner_id), so two concurrent
edits of the same owner's tree cannot both pass cycle detection.

Checks, in order:
1. task and new parent exist and are not soft-deleted (NotFound)
2. the acting owner owns both (Unauthorized)
3. the task is not its own parent (Validation)
4. the task is not an ancestor of the new parent (Validation, circular reference)
5. the new parent's depth + 1, and every moved descendant, stay within the limit (Validation)
"""

import logging
from typing import Any, NoReturn

from observability import hierarchy_violations, tasks_reparented
from opentelemetry import trace

from application.services.hierarchy_navigator import TaskHierarchyNavigator
from domain.entities import Task
from domain.exceptions import TaskValidationError
from domain.repositories import TaskRepository

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class TaskHierarchyGuard:
    """Keeps the parent graph of every owner an acyclic, depth-bounded forest."""

    def __init__(self, task_repository: TaskRepository, navigator: TaskHierarchyNavigator | None = None):
        self._task_repository = task_repository
        self._navigator = navigator or TaskHierarchyNavigator(task_repository)

    @property
    def max_depth(self) -> int:
        return self._navigator.max_depth

    async def set_parent_async(self, task_id: str, new_parent_id: str, owner_id: str) -> Task:
        """Move a task (with its subtree) under new_parent_id.

        Setting the parent a task already has succeeds without change.

        Returns:
            The updated task

        Raises:
            TaskNotFoundError: task or parent missing or soft-deleted
            TaskAccessDeniedError: owner_id does not own the task or the parent
            TaskValidationError: self-parent, circular reference or max depth exceeded
        """
        with tracer.start_as_current_span("set_task_parent") as span:
            span.set_attribute("task.id", task_id)
            span.set_attribute("task.new_parent_id", new_parent_id)

            async with self._task_repository.hierarchy_transaction(owner_id):
                task = await self._navigator.get_task_async(task_id, owner_id)
                parent = await self._navigator.get_task_async(new_parent_id, owner_id, role="Parent task")

                if task_id == new_parent_id:
                    self._reject("self_parent", "A task cannot be its own parent (self-parent)", task_id)

                if task.state.parent_task_id == new_parent_id:
                    span.set_attribute("hierarchy.changed", False)
                    return task

                chain = await self._navigator.walk_up_async(parent, include_deleted=True)
                if any(ancestor.id() == task_id for ancestor in chain):
                    self._reject(
                        "circular_reference",
                        f"Cannot set parent: task {new_parent_id} is a descendant of task {task_id} (circular reference)",
                        task_id,
                        {"new_parent_id": new_parent_id},
                    )

                parent_depth = len(chain)
                await self._ensure_depth_allowed(task, parent_depth)

                task.set_parent(new_parent_id)
                await self._task_repository.update_async(task)
                span.set_attribute("hierarchy.changed", True)
                span.set_attribute("hierarchy.parent_depth", parent_depth)

        tasks_reparented.add(1, {"operation": "set_parent"})
        logger.info(f"Task {task_id} moved under parent {new_parent_id} (parent depth {parent_depth})")
        return task

    async def clear_parent_async(self, task_id: str, owner_id: str) -> Task:
        """Promote a task to a root. Its subtree moves with it.

        Raises:
            TaskNotFoundError: task missing or soft-deleted
            TaskAccessDeniedError: owner_id does not own the task
        """
        with tracer.start_as_current_span("clear_task_parent") as span:
            span.set_attribute("task.id", task_id)

            async with self._task_repository.hierarchy_transaction(owner_id):
                task = await self._navigator.get_task_async(task_id, owner_id)
                if not task.clear_parent():
                    span.set_attribute("hierarchy.changed", False)
                    return task
                await self._task_repository.update_async(task)
                span.set_attribute("hierarchy.changed", True)

        tasks_reparented.add(1, {"operation": "clear_parent"})
        logger.info(f"Task {task_id} promoted to a root task")
        return task

    async def validate_new_child_async(self, parent_id: str, owner_id: str) -> int:
        """Check that a new task may be created under parent_id.

        Returns:
            The parent's depth

        Raises:
            TaskNotFoundError: parent missing or soft-deleted
            TaskAccessDeniedError: owner_id does not own the parent
            TaskValidationError: the new task would exceed the depth limit
        """
        parent = await self._navigator.get_task_async(parent_id, owner_id, role="Parent task")
        parent_depth = len(await self._navigator.walk_up_async(parent, include_deleted=True))
        if parent_depth + 1 > self.max_depth:
            self._reject(
                "max_depth",
                f"Cannot create task: max depth exceeded (parent depth is {parent_depth}, limit is {self.max_depth})",
                parent_id,
                {"parent_depth": parent_depth},
            )
        return parent_depth

    async def get_depth_async(self, task_id: str) -> int:
        return await self._navigator.get_depth_async(task_id)

    async def is_descendant_of_async(self, task_id: str, potential_ancestor_id: str) -> bool:
        return await self._navigator.is_descendant_of_async(task_id, potential_ancestor_id)

    async def _ensure_depth_allowed(self, task: Task, parent_depth: int) -> None:
        if parent_depth + 1 > self.max_depth:
            self._reject(
                "max_depth",
                f"Cannot set parent: max depth exceeded (parent depth is {parent_depth}, limit is {self.max_depth})",
                task.id(),
                {"parent_depth": parent_depth},
            )

        # The whole subtree moves along, so its deepest node must fit as well
        levels = await self._navigator.expand_subtree_async(task)
        subtree_height = max(depth for _, depth in levels.values())
        if parent_depth + 1 + subtree_height > self.max_depth:
            self._reject(
                "max_depth",
                f"Cannot set parent: max depth exceeded (parent depth is {parent_depth} and the moved subtree is {subtree_height} levels deep, limit is {self.max_depth})",
                task.id(),
                {"parent_depth": parent_depth, "subtree_height": subtree_height},
            )

    def _reject(self, reason: str, message: str, task_id: str, details: dict[str, Any] | None = None) -> NoReturn:
        hierarchy_violations.add(1, {"reason": reason})
        logger.warning(f"Hierarchy edit rejected for task {task_id}: {message}")
        raise TaskValidationError(message, {"task_id": task_id, "reason": reason, **(details or {})})
