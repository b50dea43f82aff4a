from dataclasses import dataclass, field
from datetime import datetime

INBOX_PROJECT_ID = "inbox"
INBOX_PROJECT_NAME = "Inbox"
INBOX_PROJECT_COLOR = "#5E81AC"


@dataclass
class Project:
    id: str
    name: str
    color: str = ""
    archived: bool = False
    position: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_inbox(self) -> bool:
        return self.id == INBOX_PROJECT_ID
