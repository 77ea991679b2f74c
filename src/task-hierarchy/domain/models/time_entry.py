"""TimeEntry value object.

A duration logged against exactly one task.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from domain.enums import EntryType
from domain.exceptions import TaskValidationError

MAX_MINUTES_PER_ENTRY = 1440  # 24 hours
MAX_NOTE_LENGTH = 500


@dataclass(frozen=True)
class TimeEntry:
    """A logged duration attached to a single task.

    Time entries are read-only inputs to the time aggregator; the hierarchy
    core never creates or mutates them.
    """

    task_id: str
    user_id: str
    minutes: int
    entry_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entry_type: EntryType = EntryType.MANUAL
    note: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        if self.minutes < 1 or self.minutes > MAX_MINUTES_PER_ENTRY:
            raise TaskValidationError(f"Minutes must be between 1 and {MAX_MINUTES_PER_ENTRY}")
        if self.note and len(self.note) > MAX_NOTE_LENGTH:
            raise TaskValidationError(f"Note cannot exceed {MAX_NOTE_LENGTH} characters")
