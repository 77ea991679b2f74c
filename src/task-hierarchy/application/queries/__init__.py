"""Application queries package.

Task read intents: single task, filtered/paged lists, hierarchy traversal,
logged-time rollups and the timeline view. All queries are re-exported here
for Neuroglia framework auto-discovery.
"""

from .get_task_by_id_query import GetTaskByIdQuery, GetTaskByIdQueryHandler
from .get_task_hierarchy_queries import (
    GetTaskAncestorsQuery,
    GetTaskAncestorsQueryHandler,
    GetTaskChildrenQuery,
    GetTaskChildrenQueryHandler,
    GetTaskDescendantsQuery,
    GetTaskDescendantsQueryHandler,
)
from .get_tasks_query import GetTasksQuery, GetTasksQueryHandler
from .get_time_queries import (
    GetTaskTimeRollupsQuery,
    GetTaskTimeRollupsQueryHandler,
    GetTimelineTasksQuery,
    GetTimelineTasksQueryHandler,
)

__all__ = [
    "GetTaskByIdQuery",
    "GetTaskByIdQueryHandler",
    "GetTasksQuery",
    "GetTasksQueryHandler",
    "GetTaskChildrenQuery",
    "GetTaskChildrenQueryHandler",
    "GetTaskAncestorsQuery",
    "GetTaskAncestorsQueryHandler",
    "GetTaskDescendantsQuery",
    "GetTaskDescendantsQueryHandler",
    "GetTaskTimeRollupsQuery",
    "GetTaskTimeRollupsQueryHandler",
    "GetTimelineTasksQuery",
    "GetTimelineTasksQueryHandler",
]
