from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class TimeEntry:
    id: str
    task_id: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration: int = 0  # minutes, set when the entry is closed
    description: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_running(self) -> bool:
        return self.ended_at is None

    def elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        end = self.ended_at or now or datetime.now()
        return max(0, int((end - self.started_at).total_seconds()))

    def calculated_duration(self, now: Optional[datetime] = None) -> int:
        """Duration in whole minutes; running entries are measured up to now."""
        if self.ended_at is not None and self.duration:
            return self.duration
        return self.elapsed_seconds(now) // 60
