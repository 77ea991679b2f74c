"""Update task command with handler."""

import time
from dataclasses import dataclass
from datetime import datetime

from neuroglia.core import OperationResult
from neuroglia.mediation import Command, CommandHandler
from neuroglia.observability.tracing import add_span_attributes
from observability import task_processing_time, tasks_failed
from opentelemetry import trace

from application.mapping import to_task_dto
from application.services import TaskHierarchyNavigator
from domain.enums import TaskPriority, TaskStatus, TaskType
from domain.exceptions import TaskHierarchyError, TaskValidationError
from domain.models import parse_enum
from domain.repositories import TaskRepository
from integration.models import TaskDto

from .command_handler_base import TaskHandlerBase

tracer = trace.get_tracer(__name__)


@dataclass
class UpdateTaskCommand(Command[OperationResult[TaskDto]]):
    """Command to update the attributes of an existing task.

    Fields left as None are not changed; clear_description and clear_due_date
    reset those optional fields to None. The parent is changed through
    SetTaskParentCommand / RemoveTaskParentCommand only.
    """

    task_id: str
    name: str | None = None
    description: str | None = None
    clear_description: bool = False
    status: str | None = None
    priority: str | None = None
    task_type: str | None = None
    progress: int | None = None
    due_date: datetime | None = None
    clear_due_date: bool = False
    user_info: dict | None = None


class UpdateTaskCommandHandler(
    TaskHandlerBase,
    CommandHandler[UpdateTaskCommand, OperationResult[TaskDto]],
):
    """Handle task updates with ownership checks."""

    def __init__(self, task_repository: TaskRepository, navigator: TaskHierarchyNavigator):
        super().__init__()
        self.task_repository = task_repository
        self.navigator = navigator

    async def handle_async(self, request: UpdateTaskCommand) -> OperationResult[TaskDto]:
        """Handle update task command with custom instrumentation."""
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
            tasks_failed.add(1, {"reason": "unauthorized", "operation": "update"})
            return self.missing_owner()

        try:
            task = await self.navigator.get_task_async(command.task_id, owner_id)

            # Parse everything up front so an invalid value leaves the task untouched
            status = parse_enum(TaskStatus, command.status, "status") if command.status is not None else None
            priority = parse_enum(TaskPriority, command.priority, "priority") if command.priority is not None else None
            task_type = parse_enum(TaskType, command.task_type, "type") if command.task_type is not None else None
            if command.progress is not None and not 0 <= command.progress <= 100:
                raise TaskValidationError("Progress must be between 0 and 100")

            with tracer.start_as_current_span("update_task_entity") as span:
                changes: list[str] = []
                if command.name is not None and task.update_name(command.name):
                    changes.append("name")
                if command.clear_description:
                    if task.update_description(None):
                        changes.append("description")
                elif command.description is not None and task.update_description(command.description):
                    changes.append("description")
                if status is not None and task.update_status(status):
                    changes.append("status")
                if priority is not None and task.update_priority(priority):
                    changes.append("priority")
                if task_type is not None and task.update_type(task_type):
                    changes.append("task_type")
                if command.progress is not None and task.update_progress(command.progress):
                    changes.append("progress")
                if command.clear_due_date:
                    if task.update_due_date(None):
                        changes.append("due_date")
                elif command.due_date is not None and task.update_due_date(command.due_date):
                    changes.append("due_date")

                span.set_attribute("task.updated_fields", ",".join(changes))
        except TaskHierarchyError as e:
            tasks_failed.add(1, {"reason": e.error_code, "operation": "update"})
            return self.failure_from(e)

        if changes:
            task = await self.task_repository.update_async(task)

        task_processing_time.record((time.time() - start_time) * 1000, {"operation": "update", "changed": bool(changes)})
        return self.ok(to_task_dto(task))
