"""Domain value objects for the task hierarchy.

These are immutable value objects that encapsulate domain concepts.

All value objects use @dataclass(frozen=True) for immutability.
"""

from .paged_result import PagedResult
from .query_specification import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_SEARCH_TERM_LENGTH, TaskQuerySpecification, parse_enum
from .task_assignment import TaskAssignment
from .time_entry import TimeEntry
from .time_rollup import TaskTimeRollup
from .timeline_query import MAX_TIMELINE_RANGE_DAYS, TimelineQuery
from .timestamps import as_utc

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MAX_SEARCH_TERM_LENGTH",
    "MAX_TIMELINE_RANGE_DAYS",
    "PagedResult",
    "TaskAssignment",
    "TaskQuerySpecification",
    "TaskTimeRollup",
    "TimeEntry",
    "TimelineQuery",
    "as_utc",
    "parse_enum",
]
