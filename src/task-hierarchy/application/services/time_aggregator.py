"""Time rollup and date-span aggregation.

Rollups are computed per request and never cached: the requested subtrees
are expanded breadth-first, direct minutes are fetched in one store call,
and subtree totals are propagated in a single bottom-up pass ordered by
depth (deepest first).
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from observability import rollup_subtree_size
from opentelemetry import trace

from application.services.hierarchy_navigator import TaskHierarchyNavigator
from application.settings import app_settings
from domain.entities import Task
from domain.models import TaskAssignment, TaskTimeRollup, TimelineQuery
from domain.repositories import TaskRepository
from integration.models import TimelineTaskDto

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

_LATEST = datetime.max.replace(tzinfo=timezone.utc)


class TaskTimeAggregator:
    """Computes logged-minute rollups and timeline spans."""

    def __init__(
        self,
        task_repository: TaskRepository,
        navigator: TaskHierarchyNavigator | None = None,
        timeline_max_range_days: int | None = None,
    ):
        self._task_repository = task_repository
        self._navigator = navigator or TaskHierarchyNavigator(task_repository)
        self._timeline_max_range_days = timeline_max_range_days or app_settings.timeline_max_range_days

    async def rollup_async(self, task_ids: Iterable[str]) -> dict[str, TaskTimeRollup]:
        """Direct, children and total minutes for every task of the requested subtrees.

        Unknown or soft-deleted requested ids are skipped. The result holds one
        rollup per task of the expanded subtrees, not only the requested roots.

        Raises:
            HierarchyConsistencyError: if a subtree contains a cycle
        """
        with tracer.start_as_current_span("rollup_logged_time") as span:
            tasks: dict[str, Task] = {}
            depths: dict[str, int] = {}
            for task_id in dict.fromkeys(task_ids):
                if task_id in tasks:
                    # Already expanded as part of an earlier requested subtree
                    continue
                root = await self._task_repository.get_async(task_id)
                if root is None or root.state.is_deleted:
                    continue
                for node_id, (node, depth) in (await self._navigator.expand_subtree_async(root)).items():
                    tasks[node_id] = node
                    # A node seen from several requested roots keeps its deepest level,
                    # so children always sort after their parents
                    depths[node_id] = max(depth, depths.get(node_id, -1))

            direct = await self._task_repository.get_time_entry_totals_async(list(tasks))
            children_totals: dict[str, int] = dict.fromkeys(tasks, 0)
            for node_id in sorted(tasks, key=lambda i: depths[i], reverse=True):
                parent_id = tasks[node_id].state.parent_task_id
                if parent_id in children_totals:
                    children_totals[parent_id] += direct.get(node_id, 0) + children_totals[node_id]

            span.set_attribute("rollup.task_count", len(tasks))
            rollup_subtree_size.record(len(tasks))

        logger.debug(f"Rolled up logged time over {len(tasks)} tasks")
        return {node_id: TaskTimeRollup(task_id=node_id, direct=direct.get(node_id, 0), children_total=children_totals[node_id]) for node_id in tasks}

    async def get_timeline_async(self, owner_id: str, query: TimelineQuery) -> list[TimelineTaskDto]:
        """Tasks due inside the query window, with their direct parents.

        Each task spans (created_at, due_date or created_at); parents are
        widened to cover their returned children, deepest parents first.

        Raises:
            TaskValidationError: end before start, or a window over the allowed range
        """
        query.validate(max_range_days=self._timeline_max_range_days)

        with tracer.start_as_current_span("get_timeline_tasks") as span:
            owned = {task.id(): task for task in await self._task_repository.get_by_owner_async(owner_id)}
            assignments = await self._task_repository.get_assignments_async(list(owned))

            selected: dict[str, Task] = {}
            for task_id, task in owned.items():
                if self._matches(task, query, assignments.get(task_id, [])):
                    selected[task_id] = task
            for task in list(selected.values()):
                parent_id = task.state.parent_task_id
                if parent_id and parent_id in owned:
                    selected.setdefault(parent_id, owned[parent_id])

            spans = {task_id: self._initial_span(task) for task_id, task in selected.items()}
            for task_id in sorted(selected, key=lambda i: self._depth_within(i, selected), reverse=True):
                parent_id = selected[task_id].state.parent_task_id
                if parent_id in spans:
                    child_start, child_end = spans[task_id]
                    parent_start, parent_end = spans[parent_id]
                    spans[parent_id] = (min(parent_start, child_start), max(parent_end, child_end))

            ordered = sorted(selected.values(), key=lambda t: (t.state.due_date is None, t.state.due_date or _LATEST, t.id()))
            span.set_attribute("timeline.task_count", len(ordered))

        return [self._to_timeline_dto(task, spans[task.id()], assignments.get(task.id(), [])) for task in ordered]

    @staticmethod
    def _matches(task: Task, query: TimelineQuery, assignments: list[TaskAssignment]) -> bool:
        if not query.contains(task.state.due_date):
            return False
        if query.status is not None and task.state.status != query.status:
            return False
        if query.priority is not None and task.state.priority != query.priority:
            return False
        if query.assignee_id is not None and not any(a.user_id == query.assignee_id and a.is_active for a in assignments):
            return False
        return True

    @staticmethod
    def _initial_span(task: Task) -> tuple[datetime, datetime]:
        start = task.state.created_at
        end = task.state.due_date or start
        return start, end

    @staticmethod
    def _depth_within(task_id: str, selected: dict[str, Task]) -> int:
        depth = 0
        parent_id = selected[task_id].state.parent_task_id
        while parent_id in selected and depth <= len(selected):
            depth += 1
            parent_id = selected[parent_id].state.parent_task_id
        return depth

    @staticmethod
    def _to_timeline_dto(task: Task, span: tuple[datetime, datetime], assignments: list[TaskAssignment]) -> TimelineTaskDto:
        start, end = span
        return TimelineTaskDto(
            id=task.id(),
            name=task.state.name,
            start_date=start,
            end_date=end,
            duration=max(0, (end.date() - start.date()).days),
            status=task.state.status,
            priority=task.state.priority,
            task_type=task.state.task_type,
            progress=task.state.progress,
            parent_task_id=task.state.parent_task_id,
            assignee_ids=[a.user_id for a in assignments if a.is_active],
        )
