"""Hierarchical flattening of visible tasks into display order."""

from typing import Iterable, List, Set

from core import Task


def flatten_tasks(visible: Iterable[Task], expanded: Set[str]) -> List[Task]:
    """Emit each top-level task followed by its subtasks when expanded.

    Subtasks keep their loaded order and are never filtered on their own.
    """
    rows: List[Task] = []
    for task in visible:
        rows.append(task)
        if task.id in expanded and task.subtasks:
            rows.extend(task.subtasks)
    return rows


__all__ = ["flatten_tasks"]
