from .task_dto import TaskDto
from .task_hierarchy_dto import PATH_SEPARATOR, TaskHierarchyDto
from .timeline_task_dto import TimelineTaskDto

__all__ = [
    "PATH_SEPARATOR",
    "TaskDto",
    "TaskHierarchyDto",
    "TimelineTaskDto",
]
