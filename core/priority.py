from enum import Enum
from typing import Dict, Final, Optional


class Priority(Enum):
    """Task priority, totally ordered low < medium < high < urgent."""

    LOW = ("low", 0, "priority.low", "↓")
    MEDIUM = ("medium", 1, "priority.medium", "·")
    HIGH = ("high", 2, "priority.high", "↑")
    URGENT = ("urgent", 3, "priority.urgent", "‼")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def weight(self) -> int:
        return self.value[1]

    @property
    def style(self) -> str:
        return self.value[2]

    @property
    def icon(self) -> str:
        return self.value[3]

    @property
    def sort_rank(self) -> int:
        """Rank used by list ordering: urgent first."""
        return 3 - self.weight

    def __lt__(self, other: "Priority") -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.weight < other.weight

    def next(self) -> "Priority":
        """Cycle low -> medium -> high -> urgent -> low."""
        order = list(Priority)
        return order[(order.index(self) + 1) % len(order)]

    @classmethod
    def from_string(cls, value: str) -> "Priority":
        parsed = parse_priority(value)
        if parsed is None:
            raise ValueError(f"Invalid priority: {value!r}")
        return parsed


PRIORITY_KEYWORDS: Final[Dict[str, Priority]] = {
    "low": Priority.LOW,
    "l": Priority.LOW,
    "medium": Priority.MEDIUM,
    "med": Priority.MEDIUM,
    "m": Priority.MEDIUM,
    "high": Priority.HIGH,
    "hi": Priority.HIGH,
    "h": Priority.HIGH,
    "urgent": Priority.URGENT,
    "u": Priority.URGENT,
}


def parse_priority(value: str) -> Optional[Priority]:
    """Resolve a priority keyword or abbreviation; None when unrecognized."""
    return PRIORITY_KEYWORDS.get((value or "").strip().lower())
