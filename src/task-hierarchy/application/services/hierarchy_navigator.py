"""Hierarchy traversal service.

Computes ancestor chains, descendant subtrees and depths from the parent
pointers held by the TaskRepository. Every walk is bounded: stored data that
violates the hierarchy invariants (a cycle, or a chain longer than the depth
limit) raises HierarchyConsistencyError instead of looping.
"""

import logging
from collections import deque
from typing import NoReturn

from observability import hierarchy_consistency_errors
from opentelemetry import trace

from application.settings import app_settings
from domain.entities import Task
from domain.exceptions import HierarchyConsistencyError, TaskAccessDeniedError, TaskNotFoundError
from domain.repositories import TaskRepository
from integration.models import PATH_SEPARATOR, TaskHierarchyDto

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class TaskHierarchyNavigator:
    """Answers children/ancestors/descendants questions about a task.

    Read operations stop at soft-deleted tasks: a deleted parent ends an
    ancestor chain and deleted children are not expanded. Depth computations
    used for validation follow every stored pointer (see get_depth_async).
    """

    def __init__(self, task_repository: TaskRepository, max_depth: int | None = None):
        """Initialize the navigator.

        Args:
            task_repository: Store holding the parent pointers
            max_depth: Depth limit (root = 0); defaults to the configured max_hierarchy_depth
        """
        self._task_repository = task_repository
        self._max_depth = max_depth if max_depth is not None else app_settings.max_hierarchy_depth

    @property
    def max_depth(self) -> int:
        return self._max_depth

    async def get_task_async(self, task_id: str, owner_id: str | None = None, role: str = "Task") -> Task:
        """Load a live task, optionally checking it belongs to owner_id.

        Raises:
            TaskNotFoundError: if the task does not exist or is soft-deleted
            TaskAccessDeniedError: if owner_id is given and does not own the task
        """
        task = await self._task_repository.get_async(task_id)
        if task is None or task.state.is_deleted:
            raise TaskNotFoundError(task_id, role)
        if owner_id is not None and task.state.owner_id != owner_id:
            raise TaskAccessDeniedError(f"You do not have access to {role.lower()} {task_id}", task_id=task_id)
        return task

    async def get_children_async(self, task_id: str, owner_id: str | None = None) -> list[Task]:
        """Non-deleted direct children, oldest first (ties on id)."""
        await self.get_task_async(task_id, owner_id)
        children = await self._task_repository.get_children_async(task_id)
        return sorted(children, key=lambda t: (t.state.created_at, t.id()))

    async def get_ancestors_async(self, task_id: str, owner_id: str | None = None) -> list[TaskHierarchyDto]:
        """Ancestor chain of a task ordered root-first, immediate parent last.

        Each element's path joins the names from that ancestor down to the
        immediate parent of the queried task, and its depth is its distance
        from the queried task (immediate parent = 1).
        """
        with tracer.start_as_current_span("get_task_ancestors") as span:
            task = await self.get_task_async(task_id, owner_id)
            chain = await self.walk_up_async(task, include_deleted=False)
            span.set_attribute("task.id", task_id)
            span.set_attribute("hierarchy.ancestor_count", len(chain))

        # chain is nearest-first; build the paths from the immediate parent upwards
        ancestors: list[TaskHierarchyDto] = []
        path = ""
        for distance, ancestor in enumerate(chain, start=1):
            path = ancestor.state.name if not path else f"{ancestor.state.name}{PATH_SEPARATOR}{path}"
            ancestors.append(
                TaskHierarchyDto(
                    task_id=ancestor.id(),
                    name=ancestor.state.name,
                    parent_task_id=ancestor.state.parent_task_id,
                    depth=distance,
                    has_children=True,
                    path=path,
                )
            )
        ancestors.reverse()
        return ancestors

    async def get_descendants_async(self, task_id: str, owner_id: str | None = None) -> list[TaskHierarchyDto]:
        """All non-deleted descendants, ordered by depth, then name, then id.

        Depth is relative to the queried task (immediate children = 1).
        """
        with tracer.start_as_current_span("get_task_descendants") as span:
            root = await self.get_task_async(task_id, owner_id)
            levels = await self.expand_subtree_async(root)
            span.set_attribute("task.id", task_id)
            span.set_attribute("hierarchy.descendant_count", len(levels) - 1)

        paths: dict[str, str] = {}
        descendants: list[TaskHierarchyDto] = []
        parents_in_result = {task.state.parent_task_id for task, depth in levels.values() if depth > 0}
        # levels preserves BFS order, so a parent's path is known before its children's
        for node_id, (task, depth) in levels.items():
            if depth == 0:
                continue
            parent_path = paths.get(task.state.parent_task_id or "")
            paths[node_id] = f"{parent_path}{PATH_SEPARATOR}{task.state.name}" if parent_path else task.state.name
            descendants.append(
                TaskHierarchyDto(
                    task_id=node_id,
                    name=task.state.name,
                    parent_task_id=task.state.parent_task_id,
                    depth=depth,
                    has_children=node_id in parents_in_result,
                    path=paths[node_id],
                )
            )
        descendants.sort(key=lambda d: (d.depth, d.name.casefold(), d.task_id))
        return descendants

    async def get_depth_async(self, task_id: str) -> int:
        """Number of ancestor edges from a task to its root (root = 0).

        Follows every stored parent pointer, soft-deleted parents included,
        so the result never under-counts a chain a later edit could extend.

        Raises:
            TaskNotFoundError: if the task does not exist
            HierarchyConsistencyError: if the chain is cyclic or longer than the limit
        """
        task = await self._task_repository.get_async(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return len(await self.walk_up_async(task, include_deleted=True))

    async def is_descendant_of_async(self, task_id: str, potential_ancestor_id: str) -> bool:
        """Whether potential_ancestor_id appears on the ancestor chain of task_id."""
        task = await self._task_repository.get_async(task_id)
        if task is None:
            return False
        chain = await self.walk_up_async(task, include_deleted=True)
        return any(ancestor.id() == potential_ancestor_id for ancestor in chain)

    async def walk_up_async(self, task: Task, include_deleted: bool) -> list[Task]:
        """Ancestors of a task, nearest first.

        The walk ends at a root or at a missing parent (and at a soft-deleted
        parent unless include_deleted is set). It is capped at max_depth + 1
        steps; exceeding the cap or revisiting a task is a consistency error.
        """
        chain: list[Task] = []
        visited = {task.id()}
        parent_id = task.state.parent_task_id
        while parent_id:
            if parent_id in visited:
                self._report_corruption(task.id(), f"Cycle detected in the ancestor chain of task {task.id()} at task {parent_id}")
            if len(chain) >= self._max_depth + 1:
                self._report_corruption(task.id(), f"Ancestor chain of task {task.id()} exceeds {self._max_depth + 1} steps")
            parent = await self._task_repository.get_async(parent_id)
            if parent is None or (parent.state.is_deleted and not include_deleted):
                break
            visited.add(parent_id)
            chain.append(parent)
            parent_id = parent.state.parent_task_id
        return chain

    async def expand_subtree_async(self, root: Task) -> dict[str, tuple[Task, int]]:
        """Breadth-first expansion of the live subtree under root.

        Returns:
            Insertion-ordered mapping of task id to (task, depth relative to root),
            root included at depth 0

        Raises:
            HierarchyConsistencyError: on a revisited task or a depth beyond max_depth
        """
        levels: dict[str, tuple[Task, int]] = {root.id(): (root, 0)}
        queue: deque[tuple[Task, int]] = deque([(root, 0)])
        while queue:
            current, depth = queue.popleft()
            for child in await self._task_repository.get_children_async(current.id()):
                child_id = child.id()
                if child_id in levels:
                    self._report_corruption(root.id(), f"Task {child_id} reached twice while expanding the subtree of task {root.id()}")
                if depth + 1 > self._max_depth:
                    self._report_corruption(root.id(), f"Subtree of task {root.id()} is deeper than {self._max_depth} levels")
                levels[child_id] = (child, depth + 1)
                queue.append((child, depth + 1))
        return levels

    def _report_corruption(self, task_id: str, message: str) -> NoReturn:
        logger.error(message)
        hierarchy_consistency_errors.add(1, {"task_id": task_id})
        raise HierarchyConsistencyError(message, {"task_id": task_id})
