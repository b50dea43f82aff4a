import contextlib
from types import SimpleNamespace

import pytest

from application.loader import LoadError, load_snapshot
from application.ports import CursorBusyError, StoreError
from core import Priority, Project, Status, Tag, Task


class _StrictStore:
    """Fake store that fails any lookup issued while the cursor is open."""

    def __init__(self, tasks, *, deps=None, blocked=None, projects=None, fail_on=None):
        self.tasks = tasks
        self.deps = deps or {}
        self.blocked = blocked or {}
        self.projects = projects or [Project(id="inbox", name="Inbox")]
        self.fail_on = fail_on
        self.cursor_open = False
        self.calls = []

    def _guard(self, name):
        self.calls.append(name)
        if self.cursor_open:
            raise CursorBusyError(name)
        if name == self.fail_on:
            raise StoreError(f"{name} failed")

    def list_projects(self, include_archived=False):
        self._guard("list_projects")
        return list(self.projects)

    def list_tags(self):
        self._guard("list_tags")
        return [Tag(id="work", name="work")]

    @contextlib.contextmanager
    def top_level_cursor(self):
        self._guard("top_level_cursor")
        self.cursor_open = True
        try:
            yield iter(self.tasks)
        finally:
            self.cursor_open = False

    def get_task_tags(self, task_id):
        self._guard("get_task_tags")
        return [Tag(id="work", name="work")] if task_id == "a" else []

    def get_subtasks(self, parent_id):
        self._guard("get_subtasks")
        if parent_id == "a":
            return [Task(id="a1", title="child", parent_id="a", project_id="inbox")]
        return []

    def get_dependencies(self, task_id):
        self._guard("get_dependencies")
        return list(self.deps.get(task_id, []))

    def is_blocked(self, task_id):
        self._guard("is_blocked")
        return self.blocked.get(task_id, False)


def _tasks():
    return [
        Task(id="a", title="first", priority=Priority.HIGH, project_id="inbox"),
        Task(id="b", title="second", project_id="inbox"),
    ]


def test_enrichment_runs_after_cursor_is_closed():
    store = _StrictStore(_tasks())
    result = load_snapshot(store)
    assert [t.id for t in result.tasks] == ["a", "b"]
    first = result.tasks[0]
    assert first.tag_ids == ["work"]
    assert [s.id for s in first.subtasks] == ["a1"]
    assert first.subtasks[0].project.name == "Inbox"
    assert first.project.name == "Inbox"
    assert store.calls.index("get_task_tags") > store.calls.index("top_level_cursor")


def test_blocked_flag_only_for_tasks_with_dependencies():
    dep = Task(id="b", title="second")
    store = _StrictStore(_tasks(), deps={"a": [dep]}, blocked={"a": True})
    result = load_snapshot(store)
    assert result.blocked == {"a": True}
    assert result.tasks[0].dependencies == [dep]
    assert store.calls.count("is_blocked") == 1


def test_any_failure_aborts_reload():
    store = _StrictStore(_tasks(), fail_on="get_subtasks")
    with pytest.raises(LoadError):
        load_snapshot(store)


def test_archived_projects_resolved_but_not_listed():
    projects = [
        Project(id="inbox", name="Inbox"),
        Project(id="old", name="Old", archived=True),
    ]
    tasks = [Task(id="a", title="legacy", project_id="old")]
    result = load_snapshot(_StrictStore(tasks, projects=projects))
    assert [p.id for p in result.projects] == ["inbox"]
    assert result.tasks[0].project.name == "Old"


def test_loads_from_sqlite_store(store):
    parent = store.create_task("parent", priority=Priority.HIGH)
    store.create_task("child", parent_id=parent.id)
    other = store.create_task("other")
    store.add_dependency(other.id, parent.id)
    result = load_snapshot(store)
    assert [t.title for t in result.tasks] == ["parent", "other"]
    assert [s.title for s in result.tasks[0].subtasks] == ["child"]
    assert result.blocked == {other.id: True}
    store.set_status(parent.id, Status.DONE)
    assert load_snapshot(store).blocked == {other.id: False}


def test_simple_namespace_store_is_enough():
    store = SimpleNamespace(
        list_projects=lambda include_archived=False: [],
        list_tags=lambda: [],
        top_level_cursor=lambda: contextlib.nullcontext(iter([])),
    )
    result = load_snapshot(store)
    assert result.tasks == [] and result.blocked == {}
