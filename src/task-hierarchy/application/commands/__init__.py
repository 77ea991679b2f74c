"""Application commands package.

Task write intents: creation, attribute updates, soft deletion and
hierarchy edits (re-parenting, promotion to root). All commands are
re-exported here for Neuroglia framework auto-discovery.
"""

from .command_handler_base import TaskHandlerBase
from .create_task_command import CreateTaskCommand, CreateTaskCommandHandler
from .delete_task_command import DeleteTaskCommand, DeleteTaskCommandHandler
from .remove_task_parent_command import RemoveTaskParentCommand, RemoveTaskParentCommandHandler
from .set_task_parent_command import SetTaskParentCommand, SetTaskParentCommandHandler
from .update_task_command import UpdateTaskCommand, UpdateTaskCommandHandler

__all__ = [
    "TaskHandlerBase",
    "CreateTaskCommand",
    "CreateTaskCommandHandler",
    "UpdateTaskCommand",
    "UpdateTaskCommandHandler",
    "DeleteTaskCommand",
    "DeleteTaskCommandHandler",
    "SetTaskParentCommand",
    "SetTaskParentCommandHandler",
    "RemoveTaskParentCommand",
    "RemoveTaskParentCommandHandler",
]
