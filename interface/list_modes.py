from enum import Enum


class Mode(Enum):
    """Input modes of the list controller; selectors are tracked separately."""

    NORMAL = "normal"
    ADD = "add"
    ADD_SUBTASK = "add_subtask"
    EDIT = "edit"
    SEARCH = "search"
    COMMAND = "command"
    CONFIRM_DELETE = "confirm_delete"

    @property
    def takes_text(self) -> bool:
        return self in (Mode.ADD, Mode.ADD_SUBTASK, Mode.EDIT, Mode.SEARCH, Mode.COMMAND)


__all__ = ["Mode"]
