"""TimelineQuery value object.

Date window and optional filters of a timeline (Gantt) view.
"""

from dataclasses import dataclass
from datetime import datetime

from domain.enums import TaskPriority, TaskStatus
from domain.exceptions import TaskValidationError
from domain.models.timestamps import as_utc

MAX_TIMELINE_RANGE_DAYS = 730  # about 2 years


@dataclass(frozen=True)
class TimelineQuery:
    """Tasks whose due date falls inside [start_date, end_date] are shown on the timeline."""

    start_date: datetime
    end_date: datetime
    assignee_id: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_date", as_utc(self.start_date))
        object.__setattr__(self, "end_date", as_utc(self.end_date))

    def validate(self, max_range_days: int = MAX_TIMELINE_RANGE_DAYS) -> None:
        if self.end_date <= self.start_date:
            raise TaskValidationError("EndDate must be after StartDate")
        if (self.end_date - self.start_date).total_seconds() / 86400 > max_range_days:
            raise TaskValidationError(f"Date range cannot exceed {max_range_days} days (approximately {max_range_days // 365} years)")

    def contains(self, moment: datetime | None) -> bool:
        return moment is not None and self.start_date <= moment <= self.end_date
