"""In-memory implementation of TaskRepository (for testing/development)."""

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from domain.entities import Task
from domain.enums import TaskSortField, TaskStatus
from domain.models import TaskAssignment, TaskQuerySpecification, TimeEntry
from domain.repositories import TaskRepository

logger = logging.getLogger(__name__)


class InMemoryTaskRepository(TaskRepository):
    """
    In-memory implementation of TaskRepository.

    Stores Task aggregates, time entries and assignments in dictionaries.
    Hierarchy edits are serialised per owner with one asyncio.Lock each.
    Suitable for testing and development only.
    """

    def __init__(self) -> None:
        """Initialize the in-memory repository."""
        # task_id -> Task
        self._tasks: dict[str, Task] = {}
        # task_id -> time entries logged directly on the task
        self._time_entries: dict[str, list[TimeEntry]] = defaultdict(list)
        # task_id -> assignments
        self._assignments: dict[str, list[TaskAssignment]] = defaultdict(list)
        # owner_id -> lock guarding hierarchy edits
        self._hierarchy_locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get_async(self, id: str) -> Task | None:
        """Get a task by ID (soft-deleted tasks included)."""
        return self._tasks.get(id)

    async def get_all_async(self) -> list[Task]:
        """Retrieve all non-deleted tasks."""
        return [task for task in self._tasks.values() if not task.state.is_deleted]

    async def contains_async(self, id: str) -> bool:
        """Check if a task exists."""
        return id in self._tasks

    async def add_async(self, entity: Task) -> Task:
        """Add a task."""
        self._tasks[entity.id()] = entity
        logger.debug(f"Added task {entity.id()} for owner {entity.state.owner_id}")
        return entity

    async def update_async(self, entity: Task) -> Task:
        """Update a task."""
        entity.state.updated_at = datetime.now(UTC)
        self._tasks[entity.id()] = entity
        logger.debug(f"Updated task {entity.id()}")
        return entity

    async def remove_async(self, id: str) -> None:
        """Physically remove a task and everything attached to it."""
        if self._tasks.pop(id, None):
            self._time_entries.pop(id, None)
            self._assignments.pop(id, None)
            logger.debug(f"Removed task {id}")

    async def _do_add_async(self, entity: Task) -> Task:
        """Internal add implementation required by Repository base class."""
        return await self.add_async(entity)

    async def _do_update_async(self, entity: Task) -> Task:
        """Internal update implementation required by Repository base class."""
        return await self.update_async(entity)

    async def _do_remove_async(self, id: str) -> None:
        """Internal remove implementation required by Repository base class."""
        await self.remove_async(id)

    async def get_by_owner_async(self, owner_id: str, status: TaskStatus | None = None) -> list[Task]:
        """Retrieve the non-deleted tasks of an owner."""
        return [
            task
            for task in self._tasks.values()
            if task.state.owner_id == owner_id and not task.state.is_deleted and (status is None or task.state.status == status)
        ]

    async def get_children_async(self, task_id: str) -> list[Task]:
        """Retrieve the non-deleted children of a task."""
        return [task for task in self._tasks.values() if task.state.parent_task_id == task_id and not task.state.is_deleted]

    async def soft_delete_async(self, task_id: str, deleted_by: str | None = None) -> bool:
        """Mark a task as deleted; its children are left untouched."""
        task = self._tasks.get(task_id)
        if task is None:
            return False
        if task.mark_as_deleted(deleted_by=deleted_by):
            logger.debug(f"Soft-deleted task {task_id}")
        return True

    async def query_with_filters_async(self, owner_id: str, spec: TaskQuerySpecification) -> tuple[list[Task], int]:
        """Filter, sort and page the owner's tasks in memory."""
        candidates = await self.get_by_owner_async(owner_id)
        matching = [task for task in candidates if spec.matches(task, self._assignments.get(task.id(), []))]

        logged_minutes = None
        if spec.sort_by == TaskSortField.LOGGED_MINUTES:
            logged_minutes = await self.get_time_entry_totals_async(task.id() for task in matching)

        ordered = spec.sort(matching, logged_minutes)
        return spec.paginate(ordered), len(matching)

    async def get_time_entry_totals_async(self, task_ids: Iterable[str]) -> dict[str, int]:
        """Sum direct minutes per task."""
        totals: dict[str, int] = {}
        for task_id in task_ids:
            entries = self._time_entries.get(task_id)
            if entries:
                totals[task_id] = sum(entry.minutes for entry in entries)
        return totals

    async def get_assignments_async(self, task_ids: Iterable[str]) -> dict[str, list[TaskAssignment]]:
        """Retrieve the assignments of each task."""
        return {task_id: list(self._assignments.get(task_id, [])) for task_id in task_ids}

    @asynccontextmanager
    async def hierarchy_transaction(self, owner_id: str) -> AsyncIterator[None]:
        """Serialise hierarchy edits of one owner."""
        lock = self._hierarchy_locks[owner_id]
        async with lock:
            yield

    def add_time_entry(self, entry: TimeEntry) -> TimeEntry:
        """Attach a time entry to its task (seeding helper)."""
        self._time_entries[entry.task_id].append(entry)
        return entry

    def add_assignment(self, assignment: TaskAssignment) -> TaskAssignment:
        """Attach an assignment to its task (seeding helper)."""
        self._assignments[assignment.task_id].append(assignment)
        return assignment

    def clear_all(self) -> None:
        """Clear all tasks, time entries and assignments (for testing)."""
        self._tasks.clear()
        self._time_entries.clear()
        self._assignments.clear()
