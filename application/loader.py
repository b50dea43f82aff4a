"""Reload of the working task set.

Runs in two phases because the store allows a single open cursor:

1. materialize: read every top-level row into memory and close the cursor;
2. enrich: with no cursor open, fetch tags, subtasks and dependencies per
   task and derive the blocked flag.

Any store failure aborts the whole reload; callers keep their previous state.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from application.ports import StoreError, TaskStore
from core import Project, Tag, Task

logger = logging.getLogger("klonch.loader")


class LoadError(Exception):
    """Reload failed; no partial result is available."""


@dataclass
class LoadResult:
    tasks: List[Task] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    blocked: Dict[str, bool] = field(default_factory=dict)


def _materialize_top_level(store: TaskStore, project_map: Dict[str, Project]) -> List[Task]:
    """Phase 1: drain the top-level cursor completely before anything else runs."""
    with store.top_level_cursor() as rows:
        tasks = list(rows)
    for task in tasks:
        task.project = project_map.get(task.project_id or "")
    return tasks


def _enrich(store: TaskStore, tasks: List[Task], project_map: Dict[str, Project]) -> Dict[str, bool]:
    """Phase 2: per-task lookups, issued only after the cursor is closed."""
    blocked: Dict[str, bool] = {}
    for task in tasks:
        task.tags = store.get_task_tags(task.id)
        subtasks = store.get_subtasks(task.id)
        for sub in subtasks:
            sub.project = project_map.get(sub.project_id or "")
            sub.tags = store.get_task_tags(sub.id)
        task.subtasks = subtasks
        task.dependencies = store.get_dependencies(task.id)
        if task.dependencies:
            blocked[task.id] = store.is_blocked(task.id)
    return blocked


def load_snapshot(store: TaskStore) -> LoadResult:
    """Fetch projects, tags and the enriched top-level task set."""
    try:
        all_projects = store.list_projects(include_archived=True)
        tags = store.list_tags()
        project_map = {project.id: project for project in all_projects}
        tasks = _materialize_top_level(store, project_map)
        blocked = _enrich(store, tasks, project_map)
    except StoreError as exc:
        logger.warning("reload failed: %s", exc)
        raise LoadError(str(exc)) from exc
    projects = [project for project in all_projects if not project.archived]
    logger.debug("reloaded %d tasks, %d projects, %d tags", len(tasks), len(projects), len(tags))
    return LoadResult(tasks=tasks, projects=projects, tags=tags, blocked=blocked)


__all__ = ["LoadError", "LoadResult", "load_snapshot"]
