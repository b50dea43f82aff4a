from datetime import datetime

import pytest

from application.quick_add import parse_quick_add, quick_add
from core import INBOX_PROJECT_ID, Priority

# Wednesday
NOW = datetime(2024, 3, 13, 10, 0, 0)


def test_parse_all_markers():
    request = parse_quick_add("Fix bug #work @urgent !high due:tomorrow", NOW)
    assert request.title == "Fix bug"
    assert request.project == "work"
    assert request.tags == ["urgent"]
    assert request.priority == Priority.HIGH
    assert request.due_date == datetime(2024, 3, 14, 23, 59, 59)


def test_unrecognized_markers_stay_in_title():
    request = parse_quick_add("Call mom !soon due:someday #", NOW)
    assert request.title == "Call mom !soon due:someday #"
    assert request.priority == Priority.MEDIUM
    assert request.due_date is None
    assert request.project is None


def test_duplicate_tags_collapse_and_last_project_wins():
    request = parse_quick_add("x @a @a @b #one #two", NOW)
    assert request.tags == ["a", "b"]
    assert request.project == "two"


def test_quick_add_creates_project_and_tags(store):
    task = quick_add(store, "Fix bug #Work @urgent !u due:today", NOW)
    assert task.title == "Fix bug"
    assert task.priority == Priority.URGENT
    project = store.get_project_by_name("work")
    assert project is not None and task.project_id == project.id
    assert [t.id for t in task.tags] == ["urgent"]
    # existing project and tag are reused
    again = quick_add(store, "Another #work @Urgent", NOW)
    assert again.project_id == project.id
    assert len(store.list_projects()) == 2
    assert len(store.list_tags()) == 1


def test_quick_add_defaults_to_inbox(store):
    assert quick_add(store, "plain", NOW).project_id == INBOX_PROJECT_ID


def test_quick_add_requires_title(store):
    with pytest.raises(ValueError):
        quick_add(store, "#work @tag !high", NOW)
    assert store.list_top_level_tasks() == []
