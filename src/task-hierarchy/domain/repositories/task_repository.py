"""Abstract repository for the Task store.

The hierarchy core reads and writes tasks only through this contract.
Implementations are in integration/repositories/.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractAsyncContextManager

from neuroglia.data.infrastructure.abstractions import Repository

from domain.entities import Task
from domain.enums import TaskStatus
from domain.models import TaskAssignment, TaskQuerySpecification


class TaskRepository(Repository[Task, str], ABC):
    """Abstract repository for Task aggregates.

    Besides the standard Repository operations (get_async, add_async,
    update_async, remove_async, contains_async), it exposes the lookups the
    hierarchy guard, navigator, query engine and time aggregator need.

    get_async returns soft-deleted tasks too (with state.is_deleted set);
    every other lookup excludes them.
    """

    @abstractmethod
    async def get_by_owner_async(self, owner_id: str, status: TaskStatus | None = None) -> list[Task]:
        """Retrieve the non-deleted tasks of an owner, optionally with a given status."""
        pass

    @abstractmethod
    async def get_children_async(self, task_id: str) -> list[Task]:
        """Retrieve the non-deleted tasks whose parent is task_id."""
        pass

    @abstractmethod
    async def soft_delete_async(self, task_id: str, deleted_by: str | None = None) -> bool:
        """Flag a task as deleted without removing it. Children keep their parent pointer.

        Returns:
            False when the task does not exist
        """
        pass

    @abstractmethod
    async def query_with_filters_async(self, owner_id: str, spec: TaskQuerySpecification) -> tuple[list[Task], int]:
        """Return one page of the owner's tasks matching the specification, plus the total match count.

        Implementations may push filtering, sorting and paging down to their
        backing store but must produce exactly what
        TaskQuerySpecification.matches / sort / paginate define.
        """
        pass

    @abstractmethod
    async def get_time_entry_totals_async(self, task_ids: Iterable[str]) -> dict[str, int]:
        """Sum the minutes of time entries attached directly to each task.

        Tasks without entries may be omitted from the result.
        """
        pass

    @abstractmethod
    async def get_assignments_async(self, task_ids: Iterable[str]) -> dict[str, list[TaskAssignment]]:
        """Retrieve the assignments of each task."""
        pass

    @abstractmethod
    def hierarchy_transaction(self, owner_id: str) -> AbstractAsyncContextManager[None]:
        """Isolation scope for a check-then-set hierarchy edit.

        Two edits of the same owner's hierarchy must not interleave inside
        this scope, otherwise two concurrent re-parents could both pass cycle
        detection.
        """
        pass
