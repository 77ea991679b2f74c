"""Repository implementations."""

from .in_memory_task_repository import InMemoryTaskRepository

__all__ = [
    "InMemoryTaskRepository",
]
