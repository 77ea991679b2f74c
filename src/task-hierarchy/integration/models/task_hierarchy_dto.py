from dataclasses import dataclass

PATH_SEPARATOR = " > "


@dataclass
class TaskHierarchyDto:
    """A task as seen from another task of the same tree.

    depth is relative to the task the traversal started from: the immediate
    parent (for ancestors) or an immediate child (for descendants) is 1.
    """

    task_id: str
    name: str
    parent_task_id: str | None
    depth: int
    has_children: bool = False
    path: str = ""
