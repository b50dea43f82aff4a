"""Messages delivered back to the list controller and the effect types that produce them.

An effect is a zero-argument callable run off the UI loop (store I/O); its
return value, if any, is a message fed to `ListController.update` on the
loop. A TimerEffect is scheduled by the host instead of being executed.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from application.history import UndoAction
from application.loader import LoadResult
from core import Priority, TimeEntry


@dataclass(frozen=True)
class TasksLoaded:
    result: Optional[LoadResult] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class TaskCreated:
    task_id: str
    error: Optional[str] = None
    action: Optional[UndoAction] = None


@dataclass(frozen=True)
class TaskUpdated:
    """A store mutation finished; the controller reloads either way."""

    error: Optional[str] = None
    action: Optional[UndoAction] = None
    message: str = ""


@dataclass(frozen=True)
class PriorityChanged:
    task_id: str
    priority: Priority
    error: Optional[str] = None
    action: Optional[UndoAction] = None


@dataclass(frozen=True)
class TimerStarted:
    entry: Optional[TimeEntry] = None
    task_title: str = ""
    stopped_minutes: Optional[int] = None
    stopped_title: str = ""
    error: Optional[str] = None
    resumed: bool = False


@dataclass(frozen=True)
class TimerStopped:
    minutes: int = 0
    task_title: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class TimeLogged:
    minutes: int = 0
    task_title: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class TrackingTick:
    generation: int


Message = Union[TasksLoaded, TaskCreated, TaskUpdated, PriorityChanged, TimerStarted, TimerStopped, TimeLogged, TrackingTick]
Effect = Callable[[], Optional[Message]]


@dataclass(frozen=True)
class TimerEffect:
    delay: float
    message: Message


Result = Union[None, Effect, TimerEffect, List[Union[Effect, TimerEffect]]]


def batch(*results: Result) -> Result:
    """Combine effects; None entries are dropped, a single effect is returned bare."""
    flat: List[Union[Effect, TimerEffect]] = []
    for item in results:
        if item is None:
            continue
        if isinstance(item, list):
            flat.extend(item)
        else:
            flat.append(item)
    if not flat:
        return None
    if len(flat) == 1:
        return flat[0]
    return flat


__all__ = [
    "TasksLoaded",
    "TaskCreated",
    "TaskUpdated",
    "PriorityChanged",
    "TimerStarted",
    "TimerStopped",
    "TimeLogged",
    "TrackingTick",
    "Message",
    "Effect",
    "TimerEffect",
    "Result",
    "batch",
]
