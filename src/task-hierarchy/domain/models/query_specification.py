"""TaskQuerySpecification value object.

Filters, sort and page parameters of a single task query. The matching and
ordering rules defined here are the semantics every TaskRepository must
honour when it executes query_with_filters_async.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable

from domain.enums import SortOrder, TaskPriority, TaskSortField, TaskStatus, TaskType
from domain.exceptions import TaskValidationError
from domain.models.task_assignment import TaskAssignment
from domain.models.timestamps import as_utc

if TYPE_CHECKING:
    from domain.entities import Task

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
MAX_SEARCH_TERM_LENGTH = 200

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class TaskQuerySpecification:
    """Structured task query.

    All filters are AND'd together; the values inside one filter are OR'd.
    Empty sets and blank search terms mean "no constraint".
    Ownership is not part of the specification: the owner is always passed
    separately and is a hard constraint.
    """

    statuses: frozenset[TaskStatus] = field(default_factory=frozenset)
    priorities: frozenset[TaskPriority] = field(default_factory=frozenset)
    types: frozenset[TaskType] = field(default_factory=frozenset)
    assignee_ids: frozenset[str] = field(default_factory=frozenset)
    due_date_from: datetime | None = None
    due_date_to: datetime | None = None
    search_term: str | None = None

    sort_by: TaskSortField = TaskSortField.CREATED_DATE
    sort_order: SortOrder = SortOrder.DESC

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        # Due dates are stored aware; naive bounds are read as UTC
        object.__setattr__(self, "due_date_from", as_utc(self.due_date_from))
        object.__setattr__(self, "due_date_to", as_utc(self.due_date_to))

    @classmethod
    def from_request(
        cls,
        statuses: Iterable[str] | None = None,
        priorities: Iterable[str] | None = None,
        types: Iterable[str] | None = None,
        assignee_ids: Iterable[str] | None = None,
        due_date_from: datetime | None = None,
        due_date_to: datetime | None = None,
        search_term: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> "TaskQuerySpecification":
        """Build a specification from raw request values.

        Raises:
            TaskValidationError: for unknown enum values, sort keys or sort orders
        """
        if sort_by:
            try:
                sort_field = TaskSortField.parse(sort_by)
            except ValueError:
                allowed = ", ".join(f.value for f in TaskSortField)
                raise TaskValidationError(f"Unknown sort key '{sort_by}'. SortBy must be one of: {allowed}", {"sort_by": sort_by})
            # An explicit key without an order sorts ascending
            default_order = SortOrder.ASC
        else:
            sort_field = TaskSortField.CREATED_DATE
            default_order = SortOrder.DESC

        if sort_order:
            try:
                order = SortOrder(sort_order.strip().lower())
            except ValueError:
                raise TaskValidationError(f"SortOrder must be either 'asc' or 'desc', got '{sort_order}'", {"sort_order": sort_order})
        else:
            order = default_order

        return cls(
            statuses=_parse_enum_set(TaskStatus, statuses, "status"),
            priorities=_parse_enum_set(TaskPriority, priorities, "priority"),
            types=_parse_enum_set(TaskType, types, "type"),
            assignee_ids=frozenset(a for a in (assignee_ids or []) if a),
            due_date_from=due_date_from,
            due_date_to=due_date_to,
            search_term=search_term,
            sort_by=sort_field,
            sort_order=order,
            page=page,
            page_size=page_size,
        )

    @property
    def normalized_search_term(self) -> str | None:
        if self.search_term is None:
            return None
        term = self.search_term.strip().lower()
        return term or None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def validate(self, max_page_size: int = MAX_PAGE_SIZE, max_search_term_length: int = MAX_SEARCH_TERM_LENGTH) -> None:
        """Reject paging, range and search values that cannot produce a stable result.

        Raises:
            TaskValidationError: describing the first invalid value
        """
        if self.page < 1:
            raise TaskValidationError("Page must be at least 1", {"page": self.page})
        if self.page_size < 1 or self.page_size > max_page_size:
            raise TaskValidationError(f"PageSize must be between 1 and {max_page_size}", {"page_size": self.page_size})
        if self.due_date_from and self.due_date_to and self.due_date_from > self.due_date_to:
            raise TaskValidationError("Due date range is malformed: 'from' is after 'to'")
        if self.search_term and len(self.search_term) > max_search_term_length:
            raise TaskValidationError(f"SearchTerm cannot exceed {max_search_term_length} characters")

    def matches(self, task: "Task", assignments: Iterable[TaskAssignment] = ()) -> bool:
        """Check whether a task satisfies every filter of this specification.

        Args:
            task: Candidate task (ownership and deletion are checked by the caller)
            assignments: The task's assignments, used by the assignee filter

        Returns:
            True if all criteria match, False otherwise
        """
        state = task.state

        if self.statuses and state.status not in self.statuses:
            return False
        if self.priorities and state.priority not in self.priorities:
            return False
        if self.types and state.task_type not in self.types:
            return False

        if self.assignee_ids:
            active = {a.user_id for a in assignments if a.is_active}
            if not active & self.assignee_ids:
                return False

        if self.due_date_from or self.due_date_to:
            if state.due_date is None:
                return False
            if self.due_date_from and state.due_date < self.due_date_from:
                return False
            if self.due_date_to and state.due_date > self.due_date_to:
                return False

        term = self.normalized_search_term
        if term:
            in_name = term in state.name.lower()
            in_description = bool(state.description) and term in state.description.lower()
            if not (in_name or in_description):
                return False

        return True

    def sort(self, tasks: Iterable["Task"], logged_minutes: Mapping[str, int] | None = None) -> list["Task"]:
        """Order tasks by the sort key, breaking ties on task id ascending.

        Args:
            tasks: Tasks to order
            logged_minutes: Direct logged minutes per task id (loggedMinutes sort)
        """
        # Python sorts are stable, also with reverse=True, so the id order
        # established first survives as the tie-breaker in both directions.
        by_id = sorted(tasks, key=lambda t: t.id())
        key = self._sort_key(logged_minutes or {})
        return sorted(by_id, key=key, reverse=self.sort_order == SortOrder.DESC)

    def paginate(self, ordered: Sequence[Any]) -> list[Any]:
        return list(ordered[self.offset : self.offset + self.page_size])

    def _sort_key(self, logged_minutes: Mapping[str, int]) -> Callable[["Task"], Any]:
        if self.sort_by == TaskSortField.NAME:
            return lambda t: t.state.name.casefold()
        if self.sort_by == TaskSortField.DUE_DATE:
            # Missing due dates come first ascending and last descending
            return lambda t: (t.state.due_date is not None, t.state.due_date or _EARLIEST)
        if self.sort_by == TaskSortField.PRIORITY:
            return lambda t: t.state.priority.ordinal
        if self.sort_by == TaskSortField.STATUS:
            return lambda t: t.state.status.ordinal
        if self.sort_by == TaskSortField.LOGGED_MINUTES:
            return lambda t: logged_minutes.get(t.id(), 0)
        return lambda t: t.state.created_at


def parse_enum(enum_type: Any, value: Any, label: str) -> Any:
    """Resolve a raw value to a member of enum_type.

    "InProgress", "in_progress" and "in-progress" all resolve to the same member.

    Raises:
        TaskValidationError: if the value names no member
    """
    if isinstance(value, enum_type):
        return value
    lookup = {member.value.replace("_", ""): member for member in enum_type}
    member = lookup.get(str(value).strip().lower().replace("_", "").replace("-", ""))
    if member is None:
        allowed = ", ".join(e.value for e in enum_type)
        raise TaskValidationError(f"Invalid {label} '{value}'. Valid values: {allowed}", {label: value})
    return member


def _parse_enum_set(enum_type: Any, values: Iterable[Any] | None, label: str) -> frozenset:
    return frozenset(parse_enum(enum_type, value, label) for value in values or [])
