import logging
from typing import Any, Dict, Optional

from neuroglia.core import OperationResult

from domain.entities import Task
from domain.exceptions import HierarchyConsistencyError, TaskAccessDeniedError, TaskHierarchyError, TaskNotFoundError

log = logging.getLogger(__name__)


class TaskHandlerBase:
    """Shared helpers of the task command and query handlers.

    Mixed into neuroglia CommandHandler/QueryHandler subclasses, whose ok(),
    not_found(), bad_request() and internal_server_error() helpers it relies on.
    """

    def _get_owner_id(self, user_info: Optional[Dict[str, Any]]) -> Optional[str]:
        """Extract the acting owner from user_info.

        Checks 'sub' (Keycloak subject) first, then 'user_id'.
        """
        if not user_info:
            return None
        return user_info.get("sub") or user_info.get("user_id")

    def unauthorized(self, message: str) -> OperationResult[Any]:
        """Return an Unauthorized (401) result."""
        return OperationResult("Unauthorized", 401, detail=message, type="https://www.w3.org/Protocols/HTTP/HTRESP.html#:~:text=Unauthorized")

    def missing_owner(self) -> OperationResult[Any]:
        return self.unauthorized("User identity is required")

    def failure_from(self, error: TaskHierarchyError) -> OperationResult[Any]:
        """Translate a task hierarchy error into the matching failed OperationResult."""
        if isinstance(error, TaskNotFoundError):
            return self.not_found(Task, error.task_id)  # type: ignore[attr-defined]
        if isinstance(error, TaskAccessDeniedError):
            return self.unauthorized(error.message)
        if isinstance(error, HierarchyConsistencyError):
            log.error(f"Hierarchy consistency failure: {error.message}")
            return self.internal_server_error(error.message)  # type: ignore[attr-defined]
        return self.bad_request(error.message)  # type: ignore[attr-defined]
