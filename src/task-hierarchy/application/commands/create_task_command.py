"""Create task command with handler."""

import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime

from neuroglia.core import OperationResult
from neuroglia.mediation import Command, CommandHandler
from neuroglia.observability.tracing import add_span_attributes
from observability import task_processing_time, tasks_created, tasks_failed
from opentelemetry import trace

from application.mapping import to_task_dto
from application.services import TaskHierarchyGuard
from domain.entities import Task
from domain.enums import TaskPriority, TaskStatus, TaskType
from domain.exceptions import TaskHierarchyError
from domain.models import parse_enum
from domain.repositories import TaskRepository
from integration.models import TaskDto

from .command_handler_base import TaskHandlerBase

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class CreateTaskCommand(Command[OperationResult[TaskDto]]):
    """Command to create a new task, as a root or under an existing parent."""

    name: str
    description: str | None = None
    status: str = "todo"
    priority: str = "medium"
    task_type: str = "task"
    progress: int = 0
    due_date: datetime | None = None
    parent_task_id: str | None = None
    user_info: dict | None = None


class CreateTaskCommandHandler(
    TaskHandlerBase,
    CommandHandler[CreateTaskCommand, OperationResult[TaskDto]],
):
    """Handle task creation."""

    def __init__(self, task_repository: TaskRepository, hierarchy_guard: TaskHierarchyGuard):
        super().__init__()
        self.task_repository = task_repository
        self.hierarchy_guard = hierarchy_guard

    async def handle_async(self, request: CreateTaskCommand) -> OperationResult[TaskDto]:
        """Handle create task command with custom instrumentation."""
        command = request
        start_time = time.time()

        add_span_attributes(
            {
                "task.name": command.name,
                "task.has_parent": command.parent_task_id is not None,
                "task.has_user_info": command.user_info is not None,
            }
        )

        owner_id = self._get_owner_id(command.user_info)
        if not owner_id:
            tasks_failed.add(1, {"reason": "unauthorized", "operation": "create"})
            return self.missing_owner()

        try:
            with tracer.start_as_current_span("create_task_entity") as span:
                status = parse_enum(TaskStatus, command.status, "status")
                priority = parse_enum(TaskPriority, command.priority, "priority")
                task_type = parse_enum(TaskType, command.task_type, "type")

                # Validation and insertion share the owner's hierarchy transaction,
                # so the parent cannot be moved deeper in between
                async with self.task_repository.hierarchy_transaction(owner_id):
                    if command.parent_task_id:
                        parent_depth = await self.hierarchy_guard.validate_new_child_async(command.parent_task_id, owner_id)
                        span.set_attribute("task.parent_depth", parent_depth)

                    now = datetime.now(UTC)
                    task = Task(
                        name=command.name,
                        owner_id=owner_id,
                        description=command.description,
                        status=status,
                        priority=priority,
                        task_type=task_type,
                        progress=command.progress,
                        due_date=command.due_date,
                        parent_task_id=command.parent_task_id,
                        created_at=now,
                        updated_at=now,
                    )
                    saved_task = await self.task_repository.add_async(task)

                span.set_attribute("task.status", status.value)
                span.set_attribute("task.priority", priority.value)
                span.set_attribute("task.type", task_type.value)
        except TaskHierarchyError as e:
            tasks_failed.add(1, {"reason": e.error_code, "operation": "create"})
            return self.failure_from(e)

        processing_time_ms = (time.time() - start_time) * 1000
        tasks_created.add(
            1,
            {
                "priority": priority.value,
                "type": task_type.value,
                "has_parent": bool(command.parent_task_id),
            },
        )
        task_processing_time.record(processing_time_ms, {"operation": "create", "priority": priority.value})
        log.info(f"Task {saved_task.id()} created by {owner_id}")

        return self.ok(to_task_dto(saved_task))
