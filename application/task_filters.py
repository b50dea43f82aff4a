"""View-mode and structured filtering of the top-level task set."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from core import Task

RECENT_WINDOW = timedelta(days=7)


class ViewMode(Enum):
    ALL = "all"
    ACTIVE = "active"
    RECENT = "recent"

    def next(self) -> "ViewMode":
        """Cycle all -> active -> recent -> all."""
        order = list(ViewMode)
        return order[(order.index(self) + 1) % len(order)]

    @classmethod
    def from_string(cls, value: str) -> "ViewMode":
        token = (value or "").strip().lower()
        for mode in cls:
            if mode.value == token:
                return mode
        raise ValueError(f"Invalid view mode: {value!r}")


class SortKey(Enum):
    PRIORITY = "priority"
    DUE = "due"
    TITLE = "title"
    STATUS = "status"
    CREATED = "created"

    @classmethod
    def from_string(cls, value: str) -> Optional["SortKey"]:
        token = (value or "").strip().lower()
        for key in cls:
            if key.value == token:
                return key
        return None


@dataclass(frozen=True)
class TaskFilters:
    """Structured filters; all active ones must match (AND)."""

    project_id: Optional[str] = None
    tag_ids: Tuple[str, ...] = field(default_factory=tuple)
    text: str = ""

    def is_active(self) -> bool:
        return bool(self.project_id or self.tag_ids or self.text)

    def with_project(self, project_id: Optional[str]) -> "TaskFilters":
        return replace(self, project_id=project_id or None)

    def with_text(self, text: str) -> "TaskFilters":
        return replace(self, text=text)

    def toggle_tag(self, tag_id: str) -> "TaskFilters":
        if tag_id in self.tag_ids:
            return replace(self, tag_ids=tuple(t for t in self.tag_ids if t != tag_id))
        return replace(self, tag_ids=self.tag_ids + (tag_id,))

    def without_tags(self) -> "TaskFilters":
        return replace(self, tag_ids=())


def passes_view_mode(task: Task, view_mode: ViewMode, now: datetime) -> bool:
    if view_mode == ViewMode.ACTIVE:
        return not task.is_done
    if view_mode == ViewMode.RECENT and task.is_done:
        if task.completed_at is None:
            return False
        return task.completed_at >= now - RECENT_WINDOW
    return True


def matches_text(task: Task, needle: str) -> bool:
    """Case-insensitive substring match; `needle` must already be lowercased."""
    if not needle:
        return True
    bare_tag = needle.removeprefix("@")
    bare_priority = needle.removeprefix("!")
    if needle in task.title.lower() or needle in task.description.lower():
        return True
    if task.project is not None and needle in task.project.name.lower():
        return True
    for tag in task.tags:
        name = tag.name.lower()
        if bare_tag in name or needle in tag.display_name.lower():
            return True
    if needle in task.status.code or needle in task.status.label:
        return True
    if bare_priority in task.priority.code:
        return True
    return any(matches_text(sub, needle) for sub in task.subtasks)


def filter_tasks(
    all_tasks: Iterable[Task],
    view_mode: ViewMode,
    filters: TaskFilters,
    now: Optional[datetime] = None,
) -> List[Task]:
    """Return the visible top-level tasks in their original order.

    `now` is sampled once for the whole pass.
    """
    moment = now or datetime.now()
    needle = filters.text.strip().lower()
    visible: List[Task] = []
    for task in all_tasks:
        if not passes_view_mode(task, view_mode, moment):
            continue
        if filters.project_id and task.project_id != filters.project_id:
            continue
        if filters.tag_ids and not all(task.has_tag(tag_id) for tag_id in filters.tag_ids):
            continue
        if needle and not matches_text(task, needle):
            continue
        visible.append(task)
    return visible


def sort_tasks(tasks: List[Task], key: SortKey) -> List[Task]:
    """Reorder visible top-level tasks; done tasks always stay last.

    PRIORITY keeps the store order, which already ranks by priority.
    """
    if key == SortKey.PRIORITY:
        return list(tasks)
    if key == SortKey.DUE:
        return sorted(tasks, key=lambda t: (t.is_done, t.due_date is None, t.due_date or datetime.max))
    if key == SortKey.TITLE:
        return sorted(tasks, key=lambda t: (t.is_done, t.title.lower()))
    if key == SortKey.STATUS:
        order = {"in_progress": 0, "pending": 1, "backlog": 2, "done": 3, "archived": 4}
        return sorted(tasks, key=lambda t: (t.is_done, order.get(t.status.code, 5)))
    return sorted(tasks, key=lambda t: (t.is_done, -t.created_at.timestamp()))


__all__ = [
    "RECENT_WINDOW",
    "ViewMode",
    "SortKey",
    "TaskFilters",
    "passes_view_mode",
    "matches_text",
    "filter_tasks",
    "sort_tasks",
]
