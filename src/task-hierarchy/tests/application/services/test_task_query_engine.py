"""Tests for TaskQueryEngine over the in-memory repository."""

from datetime import timedelta

import pytest

from application.services import TaskQueryEngine
from domain.entities import Task
from domain.enums import SortOrder, TaskPriority, TaskSortField, TaskStatus
from domain.exceptions import TaskValidationError
from domain.models import PagedResult, TaskQuerySpecification
from integration.repositories import InMemoryTaskRepository
from tests.fixtures.factories import BASE_TIME, TaskFactory, TimeEntryFactory
from tests.fixtures.mixins import BaseTestCase


class TestQueryEngine(BaseTestCase):
    """Test filtered, sorted and paginated queries."""

    async def _seed_mixed(self, repository: InMemoryTaskRepository) -> None:
        for i in range(20):
            await repository.add_async(
                TaskFactory.create(name=f"Match {i:02d}", status=TaskStatus.IN_PROGRESS, priority=TaskPriority.HIGH, created_at=BASE_TIME + timedelta(minutes=i))
            )
        for i in range(10):
            await repository.add_async(TaskFactory.create(name=f"Other {i:02d}", status=TaskStatus.TODO, priority=TaskPriority.HIGH, created_at=BASE_TIME + timedelta(minutes=i)))

    @pytest.mark.asyncio
    async def test_filtered_first_page(self, task_repository: InMemoryTaskRepository, query_engine: TaskQueryEngine, owner_id: str) -> None:
        # Arrange
        await self._seed_mixed(task_repository)
        spec: TaskQuerySpecification = TaskQuerySpecification.from_request(statuses=["InProgress"], priorities=["High"], page=1, page_size=10)

        # Act
        result: PagedResult[Task] = await query_engine.query_async(owner_id, spec)

        # Assert
        assert result.total_count == 20
        self.assert_list_length(result.items, 10)
        assert result.total_pages == 2
        assert all(t.state.status == TaskStatus.IN_PROGRESS for t in result.items)

    @pytest.mark.asyncio
    async def test_pages_cover_every_match_exactly_once(self, task_repository: InMemoryTaskRepository, query_engine: TaskQueryEngine, owner_id: str) -> None:
        # Arrange: equal priorities force the id tie-breaker to decide the order
        await self._seed_mixed(task_repository)
        seen: list[str] = []
        page = 1

        # Act
        while True:
            spec = TaskQuerySpecification(sort_by=TaskSortField.PRIORITY, sort_order=SortOrder.DESC, page=page, page_size=7)
            result: PagedResult[Task] = await query_engine.query_async(owner_id, spec)
            if not result.items:
                break
            seen.extend(t.id() for t in result.items)
            page += 1

        # Assert
        assert len(seen) == 30
        assert len(set(seen)) == 30
        assert result.total_count == len(seen)
        assert seen == sorted(seen)

    @pytest.mark.asyncio
    async def test_page_beyond_last_is_empty_with_metadata(self, task_repository: InMemoryTaskRepository, query_engine: TaskQueryEngine, owner_id: str) -> None:
        await self._seed_mixed(task_repository)

        result: PagedResult[Task] = await query_engine.query_async(owner_id, TaskQuerySpecification(page=9, page_size=10))

        assert result.items == []
        assert result.total_count == 30
        assert result.total_pages == 3

    @pytest.mark.asyncio
    async def test_default_order_is_newest_first(self, task_repository: InMemoryTaskRepository, query_engine: TaskQueryEngine, owner_id: str) -> None:
        tasks: list[Task] = TaskFactory.create_many(3)
        await self.add_tasks(task_repository, *tasks)

        result: PagedResult[Task] = await query_engine.query_async(owner_id, TaskQuerySpecification.from_request())

        self.assert_task_ids(result.items, [t.id() for t in reversed(tasks)])

    @pytest.mark.asyncio
    async def test_only_live_tasks_of_the_owner_are_returned(self, task_repository: InMemoryTaskRepository, query_engine: TaskQueryEngine, owner_id: str) -> None:
        await self.add_tasks(
            task_repository,
            TaskFactory.create(task_id="mine"),
            TaskFactory.create(task_id="deleted"),
            TaskFactory.create(task_id="foreign", owner_id="owner-2"),
        )
        await task_repository.soft_delete_async("deleted")

        result: PagedResult[Task] = await query_engine.query_async(owner_id, TaskQuerySpecification())

        self.assert_task_ids(result.items, ["mine"])

    @pytest.mark.asyncio
    async def test_logged_minutes_sort(self, task_repository: InMemoryTaskRepository, query_engine: TaskQueryEngine, owner_id: str) -> None:
        await self.add_tasks(task_repository, TaskFactory.create(task_id="a"), TaskFactory.create(task_id="b"), TaskFactory.create(task_id="c"))
        task_repository.add_time_entry(TimeEntryFactory.create("b", minutes=120))
        task_repository.add_time_entry(TimeEntryFactory.create("c", minutes=30))
        task_repository.add_time_entry(TimeEntryFactory.create("c", minutes=30))

        spec: TaskQuerySpecification = TaskQuerySpecification.from_request(sort_by="loggedMinutes", sort_order="desc")
        result: PagedResult[Task] = await query_engine.query_async(owner_id, spec)

        self.assert_task_ids(result.items, ["b", "c", "a"])

    @pytest.mark.asyncio
    async def test_invalid_specification_is_rejected(self, query_engine: TaskQueryEngine, owner_id: str) -> None:
        with pytest.raises(TaskValidationError):
            await query_engine.query_async(owner_id, TaskQuerySpecification(page=0))

    @pytest.mark.asyncio
    async def test_configured_page_size_limit_applies(self, task_repository: InMemoryTaskRepository, owner_id: str) -> None:
        engine = TaskQueryEngine(task_repository, max_page_size=20)

        with pytest.raises(TaskValidationError, match="between 1 and 20"):
            await engine.query_async(owner_id, TaskQuerySpecification(page_size=21))
