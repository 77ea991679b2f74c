"""Tests for TaskHierarchyGuard.

Covers the ordered checks (existence, ownership, self-parent, circular
reference, depth limit), promotion to root, the per-owner serialisation of
concurrent edits and a seeded randomised acyclicity/depth property.
"""

import asyncio
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pytest

from application.services import TaskHierarchyGuard, TaskHierarchyNavigator
from domain.entities import Task
from domain.exceptions import TaskAccessDeniedError, TaskNotFoundError, TaskValidationError
from domain.events.task import TaskParentChangedDomainEvent
from integration.repositories import InMemoryTaskRepository
from tests.fixtures.factories import TaskFactory
from tests.fixtures.mixins import BaseTestCase
from tests.fixtures.repositories import YieldingTaskRepository


class TestSetParent(BaseTestCase):
    """Test TaskHierarchyGuard.set_parent_async."""

    @pytest.mark.asyncio
    async def test_set_parent_moves_task(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        # Arrange
        parent, child = await self.add_tasks(task_repository, TaskFactory.create(task_id="p", name="P"), TaskFactory.create(task_id="c", name="C"))

        # Act
        result: Task = await hierarchy_guard.set_parent_async("c", "p", owner_id)

        # Assert
        assert result.state.parent_task_id == "p"
        assert (await task_repository.get_async("c")).state.parent_task_id == "p"
        assert isinstance(child.domain_events[-1], TaskParentChangedDomainEvent)

    @pytest.mark.asyncio
    async def test_self_parent_is_rejected(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        await self.add_tasks(task_repository, TaskFactory.create(task_id="x"))

        with pytest.raises(TaskValidationError, match="self-parent"):
            await hierarchy_guard.set_parent_async("x", "x", owner_id)

    @pytest.mark.asyncio
    async def test_circular_reference_is_rejected_and_tree_unchanged(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        # Arrange: A <- B <- C
        a, b, c = TaskFactory.create_chain(3, prefix="N")
        await self.add_tasks(task_repository, a, b, c)

        # Act / Assert
        with pytest.raises(TaskValidationError, match="circular reference"):
            await hierarchy_guard.set_parent_async(a.id(), c.id(), owner_id)
        assert a.state.parent_task_id is None
        assert b.state.parent_task_id == a.id()
        assert c.state.parent_task_id == b.id()

    @pytest.mark.asyncio
    async def test_parent_at_max_depth_is_rejected(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        # Arrange: T15 has depth 15
        chain: list[Task] = TaskFactory.create_chain(16)
        loose: Task = TaskFactory.create(task_id="loose")
        await self.add_tasks(task_repository, *chain, loose)

        # Act
        with pytest.raises(TaskValidationError, match="max depth exceeded") as exc_info:
            await hierarchy_guard.set_parent_async("loose", "T15", owner_id)

        # Assert
        assert exc_info.value.details["parent_depth"] == 15
        assert loose.state.parent_task_id is None

    @pytest.mark.asyncio
    async def test_task_may_reach_max_depth(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        chain: list[Task] = TaskFactory.create_chain(15)
        await self.add_tasks(task_repository, *chain, TaskFactory.create(task_id="loose"))

        await hierarchy_guard.set_parent_async("loose", "T14", owner_id)

        assert await hierarchy_guard.get_depth_async("loose") == 15

    @pytest.mark.asyncio
    async def test_moved_subtree_must_fit_within_max_depth(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        # Arrange: T13 has depth 13; X <- Y <- Z is a three-level subtree
        chain: list[Task] = TaskFactory.create_chain(14)
        subtree: list[Task] = TaskFactory.create_chain(3, prefix="S")
        await self.add_tasks(task_repository, *chain, *subtree)

        # Act / Assert: S0 would land at 14 and S2 at 16
        with pytest.raises(TaskValidationError, match="max depth exceeded"):
            await hierarchy_guard.set_parent_async("S0", "T13", owner_id)
        assert subtree[0].state.parent_task_id is None

    @pytest.mark.asyncio
    async def test_unknown_task_is_not_found(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        await self.add_tasks(task_repository, TaskFactory.create(task_id="p"))

        with pytest.raises(TaskNotFoundError):
            await hierarchy_guard.set_parent_async("missing", "p", owner_id)

    @pytest.mark.asyncio
    async def test_deleted_parent_is_not_found(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        await self.add_tasks(task_repository, TaskFactory.create(task_id="p"), TaskFactory.create(task_id="c"))
        await task_repository.soft_delete_async("p")

        with pytest.raises(TaskNotFoundError, match="Parent task"):
            await hierarchy_guard.set_parent_async("c", "p", owner_id)

    @pytest.mark.asyncio
    async def test_parent_of_another_owner_is_unauthorized(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        await self.add_tasks(task_repository, TaskFactory.create(task_id="foreign", owner_id="owner-2"), TaskFactory.create(task_id="mine"))

        with pytest.raises(TaskAccessDeniedError):
            await hierarchy_guard.set_parent_async("mine", "foreign", owner_id)

    @pytest.mark.asyncio
    async def test_existing_parent_is_a_no_op(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        await self.add_tasks(task_repository, TaskFactory.create(task_id="p"), TaskFactory.create(task_id="c", parent_task_id="p"))
        child: Task = await task_repository.get_async("c")
        event_count: int = len(child.domain_events)

        await hierarchy_guard.set_parent_async("c", "p", owner_id)

        assert len(child.domain_events) == event_count


class TestClearParent(BaseTestCase):
    """Test TaskHierarchyGuard.clear_parent_async."""

    @pytest.mark.asyncio
    async def test_clear_parent_promotes_to_root(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        chain: list[Task] = TaskFactory.create_chain(3)
        await self.add_tasks(task_repository, *chain)

        await hierarchy_guard.clear_parent_async("T1", owner_id)

        assert chain[1].state.parent_task_id is None
        assert await hierarchy_guard.get_depth_async("T2") == 1

    @pytest.mark.asyncio
    async def test_clear_parent_of_foreign_task_is_unauthorized(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard) -> None:
        await self.add_tasks(task_repository, TaskFactory.create(task_id="p"), TaskFactory.create(task_id="c", parent_task_id="p"))

        with pytest.raises(TaskAccessDeniedError):
            await hierarchy_guard.clear_parent_async("c", "owner-2")


class TestValidationHelpers(BaseTestCase):
    """Test validate_new_child_async, get_depth_async and is_descendant_of_async."""

    @pytest.mark.asyncio
    async def test_validate_new_child_returns_parent_depth(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        await self.add_tasks(task_repository, *TaskFactory.create_chain(15))

        assert await hierarchy_guard.validate_new_child_async("T14", owner_id) == 14

    @pytest.mark.asyncio
    async def test_validate_new_child_under_max_depth_parent_fails(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard, owner_id: str) -> None:
        await self.add_tasks(task_repository, *TaskFactory.create_chain(16))

        with pytest.raises(TaskValidationError, match="max depth exceeded"):
            await hierarchy_guard.validate_new_child_async("T15", owner_id)

    @pytest.mark.asyncio
    async def test_depth_and_descendant_checks(self, task_repository: InMemoryTaskRepository, hierarchy_guard: TaskHierarchyGuard) -> None:
        await self.add_tasks(task_repository, *TaskFactory.create_chain(4))

        assert await hierarchy_guard.get_depth_async("T0") == 0
        assert await hierarchy_guard.get_depth_async("T3") == 3
        assert await hierarchy_guard.is_descendant_of_async("T3", "T0") is True
        assert await hierarchy_guard.is_descendant_of_async("T0", "T3") is False
        assert await hierarchy_guard.is_descendant_of_async("missing", "T0") is False


class UnserialisedTaskRepository(YieldingTaskRepository):
    """Yielding repository that takes no lock for hierarchy edits."""

    @asynccontextmanager
    async def hierarchy_transaction(self, owner_id: str) -> AsyncIterator[None]:
        yield


class TestConcurrency(BaseTestCase):
    """Test that hierarchy edits of one owner are serialised."""

    @staticmethod
    async def _opposite_reparents(repository: InMemoryTaskRepository, owner_id: str) -> list:
        await repository.add_async(TaskFactory.create(task_id="a"))
        await repository.add_async(TaskFactory.create(task_id="b"))
        guard = TaskHierarchyGuard(repository, TaskHierarchyNavigator(repository, max_depth=15))
        return await asyncio.gather(
            guard.set_parent_async("a", "b", owner_id),
            guard.set_parent_async("b", "a", owner_id),
            return_exceptions=True,
        )

    @pytest.mark.asyncio
    async def test_opposite_reparents_never_both_succeed(self, owner_id: str) -> None:
        # Arrange
        repository = YieldingTaskRepository()

        # Act
        results = await self.await_with_timeout(self._opposite_reparents(repository, owner_id))

        # Assert
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], TaskValidationError)
        assert "circular reference" in failures[0].message
        a, b = await repository.get_async("a"), await repository.get_async("b")
        assert (a.state.parent_task_id is None) != (b.state.parent_task_id is None)

    @pytest.mark.asyncio
    async def test_interleaved_reads_without_lock_form_a_cycle(self, owner_id: str) -> None:
        # Arrange
        repository = UnserialisedTaskRepository()

        # Act
        results = await self.await_with_timeout(self._opposite_reparents(repository, owner_id))

        # Assert
        assert not any(isinstance(r, Exception) for r in results)
        a, b = await repository.get_async("a"), await repository.get_async("b")
        assert a.state.parent_task_id == "b"
        assert b.state.parent_task_id == "a"


class TestRandomisedProperties(BaseTestCase):
    """Random trees and random edits never produce a cycle or exceed the depth limit."""

    MAX_DEPTH = 4

    @staticmethod
    def _assert_forest(tasks: dict[str, Task], max_depth: int) -> None:
        for task_id, task in tasks.items():
            seen: set[str] = {task_id}
            depth = 0
            parent_id = task.state.parent_task_id
            while parent_id:
                assert parent_id not in seen, f"Cycle reachable from {task_id}"
                seen.add(parent_id)
                depth += 1
                parent_id = tasks[parent_id].state.parent_task_id
            assert depth <= max_depth, f"Task {task_id} has depth {depth}"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", [7, 42, 1234])
    async def test_random_edits_keep_an_acyclic_bounded_forest(self, task_repository: InMemoryTaskRepository, owner_id: str, seed: int) -> None:
        # Arrange
        rng = random.Random(seed)
        guard = TaskHierarchyGuard(task_repository, TaskHierarchyNavigator(task_repository, max_depth=self.MAX_DEPTH))
        tasks: dict[str, Task] = {}
        for i in range(25):
            task: Task = TaskFactory.create(task_id=f"t{i:02d}", name=f"t{i:02d}")
            tasks[task.id()] = task
            await task_repository.add_async(task)

        # Act / Assert
        for _ in range(300):
            task_id = rng.choice(list(tasks))
            if rng.random() < 0.1:
                await guard.clear_parent_async(task_id, owner_id)
            else:
                parent_id = rng.choice(list(tasks))
                snapshot = {i: t.state.parent_task_id for i, t in tasks.items()}
                try:
                    await guard.set_parent_async(task_id, parent_id, owner_id)
                except TaskValidationError:
                    assert snapshot == {i: t.state.parent_task_id for i, t in tasks.items()}
            self._assert_forest(tasks, self.MAX_DEPTH)
