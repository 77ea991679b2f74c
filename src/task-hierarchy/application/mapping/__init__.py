from .task_projection import to_task_dto

__all__ = ["to_task_dto"]
