"""TaskTimeRollup value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TaskTimeRollup:
    """Minutes logged on a task and on its whole subtree.

    direct: minutes of time entries attached to the task itself
    children_total: sum of `total` over the task's children (recursively the whole subtree)
    """

    task_id: str
    direct: int = 0
    children_total: int = 0

    @property
    def total(self) -> int:
        return self.direct + self.children_total

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "direct_logged_minutes": self.direct,
            "children_logged_minutes": self.children_total,
            "total_logged_minutes": self.total,
        }
