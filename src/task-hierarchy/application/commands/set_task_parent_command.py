"""Set task parent command with handler."""

import time
from dataclasses import dataclass

from neuroglia.core import OperationResult
from neuroglia.mediation import Command, CommandHandler
from neuroglia.observability.tracing import add_span_attributes
from observability import task_processing_time, tasks_failed

from application.mapping import to_task_dto
from application.services import TaskHierarchyGuard
from domain.exceptions import TaskHierarchyError
from integration.models import TaskDto

from .command_handler_base import TaskHandlerBase


@dataclass
class SetTaskParentCommand(Command[OperationResult[TaskDto]]):
    """Command to move a task (and its subtree) under another task."""

    task_id: str
    parent_task_id: str
    user_info: dict | None = None


class SetTaskParentCommandHandler(
    TaskHandlerBase,
    CommandHandler[SetTaskParentCommand, OperationResult[TaskDto]],
):
    """Handle re-parenting through the hierarchy guard."""

    def __init__(self, hierarchy_guard: TaskHierarchyGuard):
        super().__init__()
        self.hierarchy_guard = hierarchy_guard

    async def handle_async(self, request: SetTaskParentCommand) -> OperationResult[TaskDto]:
        command = request
        start_time = time.time()

        add_span_attributes(
            {
                "task.id": command.task_id,
                "task.parent_task_id": command.parent_task_id,
            }
        )

        owner_id = self._get_owner_id(command.user_info)
        if not owner_id:
            tasks_failed.add(1, {"reason": "unauthorized", "operation": "set_parent"})
            return self.missing_owner()

        try:
            task = await self.hierarchy_guard.set_parent_async(command.task_id, command.parent_task_id, owner_id)
        except TaskHierarchyError as e:
            tasks_failed.add(1, {"reason": e.error_code, "operation": "set_parent"})
            return self.failure_from(e)

        task_processing_time.record((time.time() - start_time) * 1000, {"operation": "set_parent"})
        return self.ok(to_task_dto(task))
