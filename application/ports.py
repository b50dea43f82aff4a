from contextlib import AbstractContextManager
from datetime import datetime
from typing import Iterator, List, Optional, Protocol

from core import Priority, Project, Status, Tag, Task, TimeEntry


class StoreError(Exception):
    """Opaque failure of a store operation."""


class CursorBusyError(StoreError):
    """A store call was issued while a result cursor is still open."""


class TaskStore(Protocol):
    """Persistence port consumed by the list controller.

    Implementations serialize all operations and allow a single open
    result cursor at a time; every other call made while that cursor is
    open must raise CursorBusyError.
    """

    # queries
    def list_projects(self, include_archived: bool = False) -> List[Project]:
        ...

    def list_tags(self) -> List[Tag]:
        ...

    def top_level_cursor(self) -> AbstractContextManager[Iterator[Task]]:
        ...

    def list_top_level_tasks(self) -> List[Task]:
        ...

    def get_task(self, task_id: str) -> Optional[Task]:
        ...

    def get_subtasks(self, parent_id: str) -> List[Task]:
        ...

    def get_task_tags(self, task_id: str) -> List[Tag]:
        ...

    def get_dependencies(self, task_id: str) -> List[Task]:
        ...

    def is_blocked(self, task_id: str) -> bool:
        ...

    # tasks
    def create_task(
        self,
        title: str,
        *,
        task_id: Optional[str] = None,
        project_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        priority: Priority = Priority.MEDIUM,
        due_date: Optional[datetime] = None,
        tag_ids: Optional[List[str]] = None,
    ) -> Task:
        ...

    def restore_task(self, task: Task) -> None:
        ...

    def restore_task_state(self, task: Task) -> None:
        ...

    def update_title(self, task_id: str, title: str) -> None:
        ...

    def set_priority(self, task_id: str, priority: Priority) -> None:
        ...

    def set_status(self, task_id: str, status: Status) -> None:
        ...

    def set_due_date(self, task_id: str, due: Optional[datetime]) -> None:
        ...

    def set_project(self, task_id: str, project_id: str) -> None:
        ...

    def set_parent(self, task_id: str, parent_id: Optional[str]) -> None:
        ...

    def delete_task(self, task_id: str) -> None:
        ...

    # tags
    def create_tag(self, name: str, color: str) -> Tag:
        ...

    def get_or_create_tag(self, name: str, color: str = "") -> Tag:
        ...

    def update_tag_color(self, tag_id: str, color: str) -> None:
        ...

    def add_tag_to_task(self, task_id: str, tag_id: str) -> None:
        ...

    def remove_tag_from_task(self, task_id: str, tag_id: str) -> None:
        ...

    # projects
    def create_project(self, name: str, color: str) -> Project:
        ...

    def get_or_create_project(self, name: str, color: str = "") -> Project:
        ...

    def update_project_color(self, project_id: str, color: str) -> None:
        ...

    def archive_project(self, project_id: str) -> None:
        ...

    def delete_project(self, project_id: str) -> None:
        ...

    # dependencies
    def add_dependency(self, task_id: str, depends_on_id: str) -> None:
        ...

    def remove_dependency(self, task_id: str, depends_on_id: str) -> None:
        ...

    # time entries
    def start_time_entry(self, task_id: str) -> TimeEntry:
        ...

    def stop_time_entry(self, entry_id: str) -> TimeEntry:
        ...

    def add_time_entry(self, task_id: str, minutes: int, description: str = "") -> TimeEntry:
        ...

    def get_active_time_entry(self) -> Optional[TimeEntry]:
        ...

    def list_time_entries(self, task_id: str) -> List[TimeEntry]:
        ...

    def close(self) -> None:
        ...
