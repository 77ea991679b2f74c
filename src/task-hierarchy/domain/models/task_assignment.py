"""TaskAssignment value object.

Many-to-many link between a task and a user.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class TaskAssignment:
    """Links a user to a task.

    Only used as input to the assignee filter and to timeline results.
    """

    task_id: str
    user_id: str
    assigned_by: str | None = None
    assigned_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_active: bool = True
