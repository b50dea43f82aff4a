"""Dependency validation with cycle detection.

Pure domain logic for task dependencies. No I/O: callers pass the loaded
task set.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from .task import Task


@dataclass(frozen=True)
class DependencyError:
    """Represents a dependency validation error."""

    task_id: str
    error_type: str  # "self", "subtask", "missing", "cycle"
    details: str

    def __str__(self) -> str:
        return f"{self.task_id}: {self.error_type} - {self.details}"


def build_dependency_graph(tasks: Iterable[Task]) -> Dict[str, List[str]]:
    """Map task id -> ids it depends on, from loaded top-level tasks."""
    return {task.id: [dep.id for dep in task.dependencies] for task in tasks}


def detect_cycle(
    task_id: str,
    depends_on: List[str],
    dependency_graph: Dict[str, List[str]],
) -> Optional[List[str]]:
    """Detect whether giving task_id these dependencies would create a cycle.

    Returns the ids forming the cycle, or None.
    """
    graph = {k: list(v) for k, v in dependency_graph.items()}
    graph[task_id] = list(depends_on)

    visited: Set[str] = set()
    rec_stack: Set[str] = set()
    path: List[str] = []

    def dfs(node: str) -> Optional[List[str]]:
        visited.add(node)
        rec_stack.add(node)
        path.append(node)
        for neighbor in graph.get(node, []):
            if neighbor not in visited:
                cycle = dfs(neighbor)
                if cycle:
                    return cycle
            elif neighbor in rec_stack:
                start = path.index(neighbor)
                return path[start:] + [neighbor]
        path.pop()
        rec_stack.remove(node)
        return None

    return dfs(task_id)


def validate_new_dependency(task: Task, depends_on: Task, tasks: Iterable[Task]) -> Optional[DependencyError]:
    """Check that `task` may start depending on `depends_on`.

    Only top-level tasks take part in dependencies, a task cannot depend on
    itself, and no cycle may form.
    """
    if task.id == depends_on.id:
        return DependencyError(task.id, "self", "Task cannot depend on itself")
    if task.is_subtask or depends_on.is_subtask:
        return DependencyError(task.id, "subtask", "Subtasks cannot have dependencies")
    graph = build_dependency_graph(tasks)
    if depends_on.id not in graph:
        return DependencyError(task.id, "missing", f"Dependency '{depends_on.id}' not found")
    current = graph.get(task.id, [])
    cycle = detect_cycle(task.id, current + [depends_on.id], graph)
    if cycle:
        return DependencyError(task.id, "cycle", " -> ".join(cycle))
    return None


def blocking_dependencies(task: Task) -> List[Task]:
    """Dependencies that are not done yet."""
    return [dep for dep in task.dependencies if not dep.is_done]


def is_blocked(task: Task) -> bool:
    return bool(blocking_dependencies(task))
