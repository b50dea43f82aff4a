"""Quick-add sentence parsing: "Fix bug #work @urgent !high due:tomorrow"."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from application.dates import parse_natural_date
from application.ports import TaskStore
from core import (
    TAG_MARKER,
    Priority,
    Task,
    normalize_tag_name,
    parse_priority,
    project_color,
    tag_color,
)

logger = logging.getLogger("klonch.quick_add")

PROJECT_MARKER = "#"
PRIORITY_MARKER = "!"
DUE_PREFIX = "due:"


@dataclass
class QuickAddRequest:
    title: str
    project: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None


def parse_quick_add(text: str, now: Optional[datetime] = None) -> QuickAddRequest:
    """Split markers from title words; unrecognized markers stay in the title."""
    title_words: List[str] = []
    request = QuickAddRequest(title="")
    for word in (text or "").split():
        if word.startswith(PROJECT_MARKER) and len(word) > 1:
            request.project = word[1:]
        elif word.startswith(TAG_MARKER) and len(word) > 1:
            name = normalize_tag_name(word)
            if name and name not in request.tags:
                request.tags.append(name)
        elif word.startswith(PRIORITY_MARKER) and parse_priority(word[1:]) is not None:
            request.priority = parse_priority(word[1:])
        elif word.lower().startswith(DUE_PREFIX):
            due = parse_natural_date(word[len(DUE_PREFIX):], now)
            if due is None:
                title_words.append(word)
            else:
                request.due_date = due
        else:
            title_words.append(word)
    request.title = " ".join(title_words)
    return request


def quick_add(store: TaskStore, text: str, now: Optional[datetime] = None) -> Task:
    """Parse and persist a quick-add sentence, creating project and tags as needed."""
    request = parse_quick_add(text, now)
    if not request.title:
        raise ValueError("task title is required")
    project_id = None
    if request.project:
        palette_index = len(store.list_projects(include_archived=True))
        project_id = store.get_or_create_project(request.project, project_color(palette_index)).id
    tag_ids: List[str] = []
    for name in request.tags:
        palette_index = len(store.list_tags())
        tag_ids.append(store.get_or_create_tag(name, tag_color(palette_index)).id)
    task = store.create_task(
        request.title,
        project_id=project_id,
        priority=request.priority,
        due_date=request.due_date,
        tag_ids=tag_ids,
    )
    logger.info("quick-added task %s", task.id)
    return task


__all__ = ["QuickAddRequest", "parse_quick_add", "quick_add", "PROJECT_MARKER", "PRIORITY_MARKER", "DUE_PREFIX"]
