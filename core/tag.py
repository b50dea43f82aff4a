from dataclasses import dataclass, field
from datetime import datetime

TAG_MARKER = "@"


def normalize_tag_name(value: str) -> str:
    """Strip whitespace and the leading marker; tags are stored bare."""
    return (value or "").strip().lstrip(TAG_MARKER).strip()


@dataclass
class Tag:
    id: str
    name: str
    color: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def display_name(self) -> str:
        return f"{TAG_MARKER}{self.name}"
