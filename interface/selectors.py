"""Modal list pickers layered over Normal mode."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

SELECTOR_EXTRA_CHARS = " -_"


class SelectorKind(Enum):
    PROJECT_ASSIGN = "project_assign"
    TAG_TOGGLE = "tag_toggle"
    DEPENDENCY_TOGGLE = "dependency_toggle"
    PROJECT_FILTER = "project_filter"
    TAG_FILTER = "tag_filter"
    PARENT_ASSIGN = "parent_assign"

    @property
    def toggles(self) -> bool:
        """Toggle selectors stay open after a choice."""
        return self in (SelectorKind.TAG_TOGGLE, SelectorKind.DEPENDENCY_TOGGLE, SelectorKind.TAG_FILTER)


@dataclass(frozen=True)
class SelectorItem:
    key: str
    label: str
    color: str = ""
    sentinel: bool = False


def is_filter_char(key: str) -> bool:
    return len(key) == 1 and (key.isalnum() or key in SELECTOR_EXTRA_CHARS)


class Selector:
    """Candidate list with type-to-filter, a wrapping cursor and an optional sentinel.

    The sentinel occupies index 0 only while the filter query is empty.
    """

    def __init__(
        self,
        kind: SelectorKind,
        items: Sequence[SelectorItem],
        *,
        title: str = "",
        sentinel: Optional[SelectorItem] = None,
        task_ids: Tuple[str, ...] = (),
        is_checked: Optional[Callable[[str], bool]] = None,
    ):
        self.kind = kind
        self.items: List[SelectorItem] = list(items)
        self.title = title
        self.sentinel = sentinel
        self.task_ids = task_ids
        self.query = ""
        self.cursor = 0
        self._is_checked = is_checked

    def visible_items(self) -> List[SelectorItem]:
        needle = self.query.lower()
        matches = [item for item in self.items if needle in item.label.lower()]
        if self.sentinel is not None and not self.query:
            return [self.sentinel] + matches
        return matches

    def current(self) -> Optional[SelectorItem]:
        visible = self.visible_items()
        if not visible:
            return None
        return visible[min(self.cursor, len(visible) - 1)]

    def move(self, delta: int) -> None:
        count = len(self.visible_items())
        if count == 0:
            self.cursor = 0
            return
        self.cursor = (self.cursor + delta) % count

    def type_char(self, key: str) -> bool:
        if not is_filter_char(key):
            return False
        self.query += key
        self.cursor = 0
        return True

    def backspace(self) -> bool:
        if not self.query:
            return False
        self.query = self.query[:-1]
        self.cursor = 0
        return True

    def is_checked(self, item: SelectorItem) -> bool:
        if item.sentinel or self._is_checked is None:
            return False
        return self._is_checked(item.key)


__all__ = ["SelectorKind", "SelectorItem", "Selector", "is_filter_char"]
