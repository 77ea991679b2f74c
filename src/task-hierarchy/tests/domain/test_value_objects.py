"""Domain layer tests for the small value objects.

Covers PagedResult metadata, TaskTimeRollup, TimeEntry and TimelineQuery
validation.
"""

from datetime import UTC, datetime, timedelta

import pytest

from domain.exceptions import TaskValidationError
from domain.models import PagedResult, TaskTimeRollup, TimeEntry, TimelineQuery
from tests.fixtures.factories import BASE_TIME, TimeEntryFactory


class TestPagedResult:
    def test_total_pages_rounds_up(self) -> None:
        result: PagedResult[int] = PagedResult(items=list(range(10)), total_count=20, page=1, page_size=10)

        assert result.total_pages == 2
        assert result.has_previous_page is False
        assert result.has_next_page is True

    def test_last_page_metadata(self) -> None:
        result: PagedResult[int] = PagedResult(items=[1], total_count=21, page=3, page_size=10)

        assert result.total_pages == 3
        assert result.has_previous_page is True
        assert result.has_next_page is False

    def test_empty_result_has_no_pages(self) -> None:
        result: PagedResult[int] = PagedResult(items=[], total_count=0, page=1, page_size=50)

        assert result.total_pages == 0
        assert result.has_next_page is False

    def test_map_keeps_metadata(self) -> None:
        result: PagedResult[int] = PagedResult(items=[1, 2], total_count=5, page=2, page_size=2)

        mapped: PagedResult[str] = result.map(str)

        assert mapped.items == ["1", "2"]
        assert mapped.to_dict()["total_pages"] == 3


class TestTaskTimeRollup:
    def test_total_adds_direct_and_children(self) -> None:
        rollup: TaskTimeRollup = TaskTimeRollup(task_id="t1", direct=30, children_total=60)

        assert rollup.total == 90
        assert rollup.to_dict()["total_logged_minutes"] == 90

    def test_leaf_defaults_to_zero(self) -> None:
        assert TaskTimeRollup(task_id="t1").total == 0


class TestTimeEntry:
    @pytest.mark.parametrize("minutes", [0, 1441])
    def test_minutes_out_of_range_are_rejected(self, minutes: int) -> None:
        with pytest.raises(TaskValidationError):
            TimeEntryFactory.create("t1", minutes=minutes)

    def test_note_length_is_limited(self) -> None:
        with pytest.raises(TaskValidationError):
            TimeEntryFactory.create("t1", note="x" * 501)

    def test_full_day_is_accepted(self) -> None:
        entry: TimeEntry = TimeEntryFactory.create("t1", minutes=1440, note="x" * 500)

        assert entry.minutes == 1440


class TestTimelineQuery:
    def test_end_must_be_after_start(self) -> None:
        with pytest.raises(TaskValidationError, match="after"):
            TimelineQuery(start_date=BASE_TIME, end_date=BASE_TIME).validate()

    def test_range_is_limited(self) -> None:
        with pytest.raises(TaskValidationError, match="730"):
            TimelineQuery(start_date=BASE_TIME, end_date=BASE_TIME + timedelta(days=731)).validate()

    def test_range_of_exactly_the_limit_is_accepted(self) -> None:
        TimelineQuery(start_date=BASE_TIME, end_date=BASE_TIME + timedelta(days=730)).validate()

    def test_contains_is_inclusive(self) -> None:
        query: TimelineQuery = TimelineQuery(start_date=BASE_TIME, end_date=datetime(2025, 2, 1, tzinfo=UTC))

        assert query.contains(BASE_TIME)
        assert query.contains(datetime(2025, 2, 1, tzinfo=UTC))
        assert not query.contains(None)

    def test_naive_window_is_read_as_utc(self) -> None:
        query: TimelineQuery = TimelineQuery(start_date=datetime(2025, 1, 1), end_date=datetime(2025, 2, 1))

        assert query.start_date == datetime(2025, 1, 1, tzinfo=UTC)
        assert query.contains(datetime(2025, 1, 15, tzinfo=UTC))
