"""Business metrics for the task hierarchy service.

Defines OpenTelemetry metrics for:
- Tasks: creation, deletion and processing time
- Hierarchy: re-parenting, rejected edits and consistency failures
- Queries: filtered queries and rollup sizes
"""

from opentelemetry import metrics

meter = metrics.get_meter(__name__)

# =============================================================================
# TASK METRICS
# =============================================================================

tasks_created = meter.create_counter(
    name="task_hierarchy.tasks.created",
    description="Total tasks created",
    unit="1",
)

tasks_deleted = meter.create_counter(
    name="task_hierarchy.tasks.deleted",
    description="Total tasks soft-deleted",
    unit="1",
)

tasks_failed = meter.create_counter(
    name="task_hierarchy.tasks.failed",
    description="Total task operation failures",
    unit="1",
)

task_processing_time = meter.create_histogram(
    name="task_hierarchy.task.processing_time",
    description="Time to process task operations",
    unit="ms",
)

# =============================================================================
# HIERARCHY METRICS
# =============================================================================

tasks_reparented = meter.create_counter(
    name="task_hierarchy.tasks.reparented",
    description="Total successful parent changes (including promotions to root)",
    unit="1",
)

hierarchy_violations = meter.create_counter(
    name="task_hierarchy.violations",
    description="Hierarchy edits rejected by the guard (self-parent, cycle, depth)",
    unit="1",
)

hierarchy_consistency_errors = meter.create_counter(
    name="task_hierarchy.consistency_errors",
    description="Cycles or unbounded chains found in stored parent pointers",
    unit="1",
)

# =============================================================================
# QUERY METRICS
# =============================================================================

task_queries = meter.create_counter(
    name="task_hierarchy.queries",
    description="Total filtered task queries",
    unit="1",
)

rollup_subtree_size = meter.create_histogram(
    name="task_hierarchy.rollup.subtree_size",
    description="Number of tasks visited by a time rollup",
    unit="1",
)
