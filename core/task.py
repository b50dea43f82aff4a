"""Task entity with its loaded relations."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .priority import Priority
from .project import Project
from .status import Status
from .tag import Tag


@dataclass
class Task:
    id: str
    title: str
    description: str = ""
    status: Status = Status.PENDING
    priority: Priority = Priority.MEDIUM
    project_id: Optional[str] = None
    parent_id: Optional[str] = None
    due_date: Optional[datetime] = None
    start_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    position: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    # Loaded relations, filled by the loader.
    project: Optional[Project] = None
    tags: List[Tag] = field(default_factory=list)
    subtasks: List["Task"] = field(default_factory=list)
    dependencies: List["Task"] = field(default_factory=list)

    @property
    def is_done(self) -> bool:
        return self.status == Status.DONE

    @property
    def is_subtask(self) -> bool:
        return bool(self.parent_id)

    @property
    def has_subtasks(self) -> bool:
        return bool(self.subtasks)

    @property
    def tag_ids(self) -> List[str]:
        return [tag.id for tag in self.tags]

    def has_tag(self, tag_id: str) -> bool:
        return any(tag.id == tag_id for tag in self.tags)

    def depends_on(self, task_id: str) -> bool:
        return any(dep.id == task_id for dep in self.dependencies)

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None or self.is_done:
            return False
        return self.due_date < (now or datetime.now())

    def is_due_today(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None:
            return False
        return self.due_date.date() == (now or datetime.now()).date()

    def set_status(self, status: Status, now: Optional[datetime] = None) -> None:
        """Change status keeping completed_at set exactly when the task is done."""
        moment = now or datetime.now()
        self.status = status
        if status == Status.DONE:
            if self.completed_at is None:
                self.completed_at = moment
        else:
            self.completed_at = None
        self.updated_at = moment

    def toggled_status(self) -> Status:
        return Status.PENDING if self.is_done else Status.DONE

    def snapshot(self) -> "Task":
        """Detached deep copy used for undo records."""
        return copy.deepcopy(self)

    def subtask_progress(self) -> tuple[int, int]:
        done = sum(1 for sub in self.subtasks if sub.is_done)
        return done, len(self.subtasks)
