"""Undo/redo history built on before/after task snapshots.

Actions are recorded before their store mutation is issued. Undo restores
the "before" snapshots, redo the "after" snapshots; create and delete are
each other's inverse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from application.ports import TaskStore
from core import Task

logger = logging.getLogger("klonch.history")

MAX_HISTORY_SIZE = 50


class ActionKind(Enum):
    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"
    TOGGLE_STATUS = "toggle_status"
    SET_PARENT = "set_parent"


@dataclass
class UndoAction:
    """One undoable step; bulk actions carry one snapshot per task."""

    kind: ActionKind
    before: List[Task] = field(default_factory=list)
    after: List[Task] = field(default_factory=list)
    description: str = ""
    # (task_id, depends_on_id) edges into deleted tasks, re-added on undo
    links: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def task_ids(self) -> List[str]:
        source = self.after if self.kind == ActionKind.CREATE else self.before
        return [task.id for task in source]


def _snapshots(tasks: Optional[List[Task]]) -> List[Task]:
    return [task.snapshot() for task in tasks or []]


def create_action(created: List[Task], description: str = "") -> UndoAction:
    return UndoAction(ActionKind.CREATE, after=_snapshots(created), description=description)


def delete_action(
    deleted: List[Task],
    description: str = "",
    links: Optional[List[Tuple[str, str]]] = None,
) -> UndoAction:
    return UndoAction(
        ActionKind.DELETE,
        before=_snapshots(deleted),
        description=description,
        links=list(links or []),
    )


def update_action(
    before: List[Task],
    after: List[Task],
    description: str = "",
    kind: ActionKind = ActionKind.UPDATE,
) -> UndoAction:
    return UndoAction(kind, before=_snapshots(before), after=_snapshots(after), description=description)


def apply_undo(store: TaskStore, action: UndoAction) -> None:
    """Replay the inverse of `action` against the store."""
    if action.kind == ActionKind.CREATE:
        for task in action.after:
            store.delete_task(task.id)
    elif action.kind == ActionKind.DELETE:
        for task in action.before:
            store.restore_task(task)
        for task_id, depends_on_id in action.links:
            store.add_dependency(task_id, depends_on_id)
    else:
        for task in action.before:
            store.restore_task_state(task)


def apply_redo(store: TaskStore, action: UndoAction) -> None:
    """Replay `action` forward again after it was undone."""
    if action.kind == ActionKind.CREATE:
        for task in action.after:
            store.restore_task(task)
    elif action.kind == ActionKind.DELETE:
        for task in action.before:
            store.delete_task(task.id)
    else:
        for task in action.after:
            store.restore_task_state(task)


class UndoHistory:
    """Bounded undo stack plus redo stack."""

    def __init__(self, limit: int = MAX_HISTORY_SIZE):
        self.limit = max(1, limit)
        self.undo_stack: List[UndoAction] = []
        self.redo_stack: List[UndoAction] = []

    def push(self, action: UndoAction) -> None:
        """Record a new action; clears redo and evicts the oldest entries."""
        self.undo_stack.append(action)
        if len(self.undo_stack) > self.limit:
            del self.undo_stack[: len(self.undo_stack) - self.limit]
        self.redo_stack.clear()
        logger.debug("recorded %s (%d ids)", action.kind.value, len(action.task_ids))

    def discard(self, action: Optional[UndoAction]) -> bool:
        """Forget an action whose store mutation failed."""
        if action is None:
            return False
        for stack in (self.undo_stack, self.redo_stack):
            for idx in range(len(stack) - 1, -1, -1):
                if stack[idx] is action:
                    del stack[idx]
                    return True
        return False

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def pop_undo(self) -> Optional[UndoAction]:
        """Move the newest action to the redo stack and return it."""
        if not self.undo_stack:
            return None
        action = self.undo_stack.pop()
        self.redo_stack.append(action)
        return action

    def pop_redo(self) -> Optional[UndoAction]:
        if not self.redo_stack:
            return None
        action = self.redo_stack.pop()
        self.undo_stack.append(action)
        return action

    def clear(self) -> None:
        self.undo_stack.clear()
        self.redo_stack.clear()


__all__ = [
    "MAX_HISTORY_SIZE",
    "ActionKind",
    "UndoAction",
    "UndoHistory",
    "create_action",
    "delete_action",
    "update_action",
    "apply_undo",
    "apply_redo",
]
