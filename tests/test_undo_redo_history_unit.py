"""Unit tests for undo/redo history (snapshots replayed against the store)."""

from core import Priority, Status, Task
from application.history import (
    ActionKind,
    UndoHistory,
    apply_redo,
    apply_undo,
    create_action,
    delete_action,
    update_action,
)


def _action(n):
    return update_action([Task(id=f"t{n}", title="before")], [Task(id=f"t{n}", title="after")])


def test_push_clears_redo_and_evicts_oldest():
    history = UndoHistory(limit=2)
    first, second, third = _action(1), _action(2), _action(3)
    history.push(first)
    history.push(second)
    assert history.pop_undo() is second
    assert history.can_redo()
    history.push(third)
    assert not history.can_redo()
    history.push(_action(4))
    assert len(history.undo_stack) == 2
    assert first not in history.undo_stack


def test_pop_moves_between_stacks():
    history = UndoHistory()
    action = _action(1)
    history.push(action)
    assert history.pop_undo() is action
    assert history.pop_undo() is None
    assert history.pop_redo() is action
    assert history.can_undo() and not history.can_redo()


def test_discard_forgets_failed_action():
    history = UndoHistory()
    keep, failed = _action(1), _action(2)
    history.push(keep)
    history.push(failed)
    assert history.discard(failed) is True
    assert history.undo_stack == [keep]
    assert history.discard(None) is False
    assert history.discard(failed) is False


def test_snapshots_are_detached():
    task = Task(id="t1", title="original")
    action = update_action([task], [task])
    task.title = "mutated"
    assert action.before[0].title == "original"
    assert action.task_ids == ["t1"]


def test_undo_redo_create_deletes_and_restores(store):
    task = store.create_task("created")
    action = create_action([task])
    apply_undo(store, action)
    assert store.get_task(task.id) is None
    apply_redo(store, action)
    assert store.get_task(task.id).title == "created"


def test_undo_redo_delete_restores_and_removes(store):
    task = store.create_task("doomed", priority=Priority.URGENT)
    action = delete_action([task])
    store.delete_task(task.id)
    apply_undo(store, action)
    assert store.get_task(task.id).priority == Priority.URGENT
    apply_redo(store, action)
    assert store.get_task(task.id) is None


def test_undo_redo_bulk_update(store):
    a = store.create_task("a")
    b = store.create_task("b")
    before = [store.get_task(a.id), store.get_task(b.id)]
    after = [t.snapshot() for t in before]
    for t in after:
        t.set_status(Status.DONE)
    action = update_action(before, after, kind=ActionKind.TOGGLE_STATUS)
    for t in after:
        store.set_status(t.id, Status.DONE)

    apply_undo(store, action)
    assert {store.get_task(a.id).status, store.get_task(b.id).status} == {Status.PENDING}
    apply_redo(store, action)
    assert store.get_task(a.id).status == Status.DONE
    assert store.get_task(b.id).completed_at is not None


def test_undo_delete_relinks_dependents(store):
    blocker = store.create_task("blocker")
    waiting = store.create_task("waiting")
    store.add_dependency(waiting.id, blocker.id)
    action = delete_action([store.get_task(blocker.id)], links=[(waiting.id, blocker.id)])
    store.delete_task(blocker.id)
    assert store.get_dependencies(waiting.id) == []
    apply_undo(store, action)
    assert [t.id for t in store.get_dependencies(waiting.id)] == [blocker.id]
    assert store.is_blocked(waiting.id)
