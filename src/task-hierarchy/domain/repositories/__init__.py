"""Domain repositories package.

Contains abstract repository interfaces.
Implementations are in integration/repositories/.
"""

from .task_repository import TaskRepository

__all__: list[str] = [
    "TaskRepository",
]
