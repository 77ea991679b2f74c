"""Remove task parent command with handler."""

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
class RemoveTaskParentCommand(Command[OperationResult[TaskDto]]):
    """Command to promote a task to a root task."""

    task_id: str
    user_info: dict | None = None


class RemoveTaskParentCommandHandler(
    TaskHandlerBase,
    CommandHandler[RemoveTaskParentCommand, OperationResult[TaskDto]],
):
    """Handle promotion to root through the hierarchy guard."""

    def __init__(self, hierarchy_guard: TaskHierarchyGuard):
        super().__init__()
        self.hierarchy_guard = hierarchy_guard

    async def handle_async(self, request: RemoveTaskParentCommand) -> OperationResult[TaskDto]:
        command = request
        start_time = time.time()

        add_span_attributes({"task.id": command.task_id})

        owner_id = self._get_owner_id(command.user_info)
        if not owner_id:
            tasks_failed.add(1, {"reason": "unauthorized", "operation": "clear_parent"})
            return self.missing_owner()

        try:
            task = await self.hierarchy_guard.clear_parent_async(command.task_id, owner_id)
        except TaskHierarchyError as e:
            tasks_failed.add(1, {"reason": e.error_code, "operation": "clear_parent"})
            return self.failure_from(e)

        task_processing_time.record((time.time() - start_time) * 1000, {"operation": "clear_parent"})
        return self.ok(to_task_dto(task))
