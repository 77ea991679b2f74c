"""Task query engine: filtered, sorted, paginated task lists."""

import logging
import time

from observability import task_processing_time, task_queries
from opentelemetry import trace

from application.settings import app_settings
from domain.entities import Task
from domain.models import PagedResult, TaskQuerySpecification
from domain.repositories import TaskRepository

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class TaskQueryEngine:
    """Evaluates a TaskQuerySpecification over one owner's tasks.

    The matching and ordering rules live on the specification; the
    repository executes them (in memory, or translated to its store).
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        max_page_size: int | None = None,
        max_search_term_length: int | None = None,
    ):
        self._task_repository = task_repository
        self._max_page_size = max_page_size or app_settings.max_page_size
        self._max_search_term_length = max_search_term_length or app_settings.search_term_max_length

    async def query_async(self, owner_id: str, spec: TaskQuerySpecification) -> PagedResult[Task]:
        """Run a query for owner_id.

        Raises:
            TaskValidationError: invalid page, page size, date range or search term
        """
        start_time = time.time()
        spec.validate(max_page_size=self._max_page_size, max_search_term_length=self._max_search_term_length)

        with tracer.start_as_current_span("query_tasks") as span:
            span.set_attribute("query.sort_by", spec.sort_by.value)
            span.set_attribute("query.sort_order", spec.sort_order.value)
            span.set_attribute("query.page", spec.page)
            span.set_attribute("query.page_size", spec.page_size)

            items, total_count = await self._task_repository.query_with_filters_async(owner_id, spec)
            span.set_attribute("query.total_count", total_count)

        result = PagedResult(items=items, total_count=total_count, page=spec.page, page_size=spec.page_size)

        task_queries.add(1, {"sort_by": spec.sort_by.value, "has_search": spec.normalized_search_term is not None})
        task_processing_time.record((time.time() - start_time) * 1000, {"operation": "query"})
        logger.debug(f"Query for owner {owner_id} matched {total_count} tasks, returning page {spec.page}/{result.total_pages}")
        return result
