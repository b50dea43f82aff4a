from enum import Enum
from typing import Final, Literal


class Status(Enum):
    BACKLOG = ("backlog", "status.backlog", "◌")
    PENDING = ("pending", "status.pending", "○")
    IN_PROGRESS = ("in_progress", "status.active", "●")
    DONE = ("done", "status.done", "✓")
    ARCHIVED = ("archived", "status.archived", "▪")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def style(self) -> str:
        return self.value[1]

    @property
    def icon(self) -> str:
        return self.value[2]

    @property
    def label(self) -> str:
        return self.code.replace("_", " ")

    @classmethod
    def from_string(cls, value: str) -> "Status":
        code = normalize_task_status(value)
        for status in cls:
            if status.code == code:
                return status
        raise ValueError(f"Invalid task status: {value!r}")


TaskStatusCode = Literal["backlog", "pending", "in_progress", "done", "archived"]

_CANONICAL_CODES: Final[frozenset[str]] = frozenset({s.code for s in Status})
_ALIASES: Final[dict[str, str]] = {
    "todo": "pending",
    "active": "in_progress",
    "in-progress": "in_progress",
    "complete": "done",
    "completed": "done",
}


def normalize_task_status(value: str) -> str:
    """Normalize status input (case, spaces, common aliases) to a canonical code.

    Raises ValueError for unknown tokens.
    """
    token = (value or "").strip().lower().replace(" ", "_")
    token = _ALIASES.get(token, token)
    if token in _CANONICAL_CODES:
        return token
    raise ValueError(f"Invalid task status: {value!r}")
