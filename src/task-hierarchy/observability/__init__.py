"""Observability utilities and metrics."""

from .metrics import (
    hierarchy_consistency_errors,
    hierarchy_violations,
    rollup_subtree_size,
    task_processing_time,
    task_queries,
    tasks_created,
    tasks_deleted,
    tasks_failed,
    tasks_reparented,
)

__all__ = [
    # Task metrics
    "tasks_created",
    "tasks_deleted",
    "tasks_failed",
    "task_processing_time",
    # Hierarchy metrics
    "tasks_reparented",
    "hierarchy_violations",
    "hierarchy_consistency_errors",
    # Query metrics
    "task_queries",
    "rollup_subtree_size",
]
