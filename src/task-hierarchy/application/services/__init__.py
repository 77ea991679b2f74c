"""Application services for the task hierarchy engine."""

from .hierarchy_guard import TaskHierarchyGuard
from .hierarchy_navigator import TaskHierarchyNavigator
from .logger import configure_logging, configure_logging_from_settings
from .task_query_engine import TaskQueryEngine
from .time_aggregator import TaskTimeAggregator

__all__ = [
    "TaskHierarchyGuard",
    "TaskHierarchyNavigator",
    "TaskQueryEngine",
    "TaskTimeAggregator",
    "configure_logging",
    "configure_logging_from_settings",
]
