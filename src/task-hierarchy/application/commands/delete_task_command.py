"""Delete task command with handler."""

import logging
import time
from dataclasses import dataclass

from neuroglia.core import OperationResult
from neuroglia.mediation import Command, CommandHandler
from neuroglia.observability.tracing import add_span_attributes
from observability import task_processing_time, tasks_deleted, tasks_failed
from opentelemetry import trace

from application.services import TaskHierarchyNavigator
from domain.exceptions import TaskHierarchyError
from domain.repositories import TaskRepository

from .command_handler_base import TaskHandlerBase

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class DeleteTaskCommand(Command[OperationResult]):
    """Command to soft-delete a task. Its children keep their parent pointer."""

    task_id: str
    user_info: dict | None = None


class DeleteTaskCommandHandler(TaskHandlerBase, CommandHandler[DeleteTaskCommand, OperationResult]):
    """Handle task soft deletion with ownership checks."""

    def __init__(self, task_repository: TaskRepository, navigator: TaskHierarchyNavigator):
        super().__init__()
        self.task_repository = task_repository
        self.navigator = navigator

    async def handle_async(self, request: DeleteTaskCommand) -> OperationResult:
        """Handle delete task command with custom instrumentation."""
        command = request
        start_time = time.time()

        add_span_attributes(
            {
                "task.id": command.task_id,
                "task.has_user_info": command.user_info is not None,
            }
        )

        owner_id = self._get_owner_id(command.user_info)
        if not owner_id:
            tasks_failed.add(1, {"reason": "unauthorized", "operation": "delete"})
            return self.missing_owner()

        # Serialised with hierarchy edits: no child can be attached while the task is removed
        async with self.task_repository.hierarchy_transaction(owner_id):
            try:
                task = await self.navigator.get_task_async(command.task_id, owner_id)
            except TaskHierarchyError as e:
                tasks_failed.add(1, {"reason": e.error_code, "operation": "delete"})
                return self.failure_from(e)

            with tracer.start_as_current_span("delete_task_entity") as span:
                span.set_attribute("task.name", task.state.name)
                span.set_attribute("task.deleted_by", owner_id)
                span.set_attribute("task.delete_mode", "soft")
                deleted = await self.task_repository.soft_delete_async(command.task_id, deleted_by=owner_id)

        if not deleted:
            tasks_failed.add(1, {"reason": "deletion_failed", "operation": "delete"})
            return self.bad_request("Failed to delete task")

        tasks_deleted.add(1)
        task_processing_time.record((time.time() - start_time) * 1000, {"operation": "delete", "status": "success"})
        log.info(f"Task {command.task_id} soft-deleted by {owner_id}")

        return self.ok(
            {
                "id": command.task_id,
                "name": task.state.name,
                "message": "Task deleted successfully",
            }
        )
