from application.ports import StoreError
from application.task_filters import ViewMode
from core import Priority, Status
from interface.list_modes import Mode
from interface.messages import TimerEffect, TrackingTick


def titles(ctl):
    return [task.title for task in ctl.tasks]


def _seed_abc(store):
    a = store.create_task("A", priority=Priority.HIGH)
    b = store.create_task("B", priority=Priority.MEDIUM)
    c = store.create_task("C", priority=Priority.LOW)
    return a, b, c


def test_initial_load_orders_by_priority(store, make_controller):
    _seed_abc(store)
    ctl = make_controller()
    assert ctl.loaded
    assert titles(ctl) == ["A", "B", "C"]
    assert ctl.cursor == 0


def test_completed_task_sorts_last(store, make_controller, press):
    store.create_task("A", priority=Priority.HIGH)
    store.create_task("B", priority=Priority.MEDIUM)
    ctl = make_controller()
    press(ctl, "tab")
    assert titles(ctl) == ["B", "A"]
    assert ctl.tasks[1].status == Status.DONE
    assert ctl.tasks[1].completed_at is not None
    assert ctl.current_status_message() == "Task completed"


def test_priority_change_defers_resort_until_cursor_moves(store, make_controller, press):
    _seed_abc(store)
    ctl = make_controller()
    press(ctl, "G")
    assert ctl.current_task().title == "C"
    press(ctl, "p", "p", "p")
    assert titles(ctl) == ["A", "B", "C"]
    assert ctl.current_task().priority == Priority.URGENT
    assert ctl.resort_pending_id == ctl.current_task().id
    press(ctl, "k")
    assert titles(ctl) == ["C", "A", "B"]
    assert ctl.resort_pending_id is None


def test_moving_within_other_rows_does_not_resort(store, make_controller, press):
    _seed_abc(store)
    ctl = make_controller()
    press(ctl, "G", "p", "p", "p", "g")
    assert titles(ctl) == ["C", "A", "B"]
    press(ctl, "j", "j", "k")
    assert titles(ctl) == ["C", "A", "B"]


def test_cursor_navigation_clamps(store, make_controller, press):
    _seed_abc(store)
    ctl = make_controller()
    press(ctl, "k")
    assert ctl.cursor == 0
    press(ctl, "end", "down")
    assert ctl.cursor == 2
    ctl.set_viewport(2)
    press(ctl, "home", "pagedown")
    assert ctl.cursor == 1
    assert ctl.scroll_offset == 0
    press(ctl, "j")
    assert ctl.scroll_offset == 1


def test_targets_prefer_selection_in_display_order(store, make_controller, press):
    _seed_abc(store)
    ctl = make_controller()
    press(ctl, "G", "space", "g", "space", "j")
    assert [ctl.find_task(tid).title for tid in ctl.get_target_ids()] == ["A", "C"]
    press(ctl, "tab")
    assert titles(ctl) == ["B", "A", "C"]
    assert ctl.history.undo_stack[-1].task_ids == [t.id for t in ctl.tasks if t.title in ("A", "C")]


def test_empty_list_has_no_targets(make_controller, press):
    ctl = make_controller()
    assert ctl.get_target_ids() == []
    press(ctl, "tab")
    assert ctl.current_status_message() == "No task selected"
    press(ctl, "d")
    assert ctl.mode == Mode.NORMAL


def test_select_all_and_escape_cascade(store, make_controller, press):
    parent = store.create_task("parent", priority=Priority.HIGH)
    store.create_task("child", parent_id=parent.id)
    store.create_task("other")
    ctl = make_controller()
    press(ctl, "o", "V")
    assert len(ctl.selected) == 3
    ctl.execute_command("filter ar")
    assert titles(ctl) == ["parent", "child"]

    press(ctl, "escape")
    assert ctl.selected == set()
    assert ctl.filters.text == "ar"
    press(ctl, "escape")
    assert not ctl.filters.is_active()
    assert titles(ctl) == ["parent", "child", "other"]
    press(ctl, "escape")
    assert ctl.expanded == set()
    assert titles(ctl) == ["parent", "other"]


def test_undo_redo_round_trip(store, make_controller, press):
    store.create_task("A", priority=Priority.HIGH)
    store.create_task("B")
    ctl = make_controller()
    press(ctl, "tab")
    assert titles(ctl) == ["B", "A"]
    press(ctl, "c-z")
    assert titles(ctl) == ["A", "B"]
    assert not ctl.find_task(ctl.tasks[0].id).is_done
    press(ctl, "c-y")
    assert titles(ctl) == ["B", "A"]
    press(ctl, "c-y")
    assert ctl.current_status_message() == "Nothing to redo"


def test_failed_mutation_discards_undo_and_reloads(store, make_controller, press, monkeypatch):
    store.create_task("A")
    ctl = make_controller()

    def boom(task_id, status):
        raise StoreError("disk full")

    monkeypatch.setattr(store, "set_status", boom)
    press(ctl, "tab")
    assert not ctl.history.can_undo()
    assert ctl.current_status_message() == "Error: disk full"
    assert ctl.tasks[0].status == Status.PENDING


def test_add_creates_and_focuses_new_task(store, make_controller, press, type_text):
    store.create_task("A", priority=Priority.HIGH)
    store.create_task("B", priority=Priority.LOW)
    ctl = make_controller()
    press(ctl, "a")
    assert ctl.mode == Mode.ADD
    type_text(ctl, "Write notes")
    press(ctl, "enter")
    assert ctl.mode == Mode.NORMAL
    assert ctl.current_task().title == "Write notes"
    assert titles(ctl) == ["A", "Write notes", "B"]
    assert ctl.resort_pending_id == ctl.current_task().id
    press(ctl, "c-z")
    assert titles(ctl) == ["A", "B"]


def test_add_with_empty_title_does_nothing(make_controller, press, type_text):
    ctl = make_controller()
    press(ctl, "a")
    type_text(ctl, "   ")
    press(ctl, "enter")
    assert ctl.tasks == []
    assert not ctl.history.can_undo()


def test_new_task_inherits_active_filters(store, make_controller, press, type_text):
    work = store.create_project("Work", "#fff")
    store.create_tag("home", "")
    ctl = make_controller()
    ctl.filters = ctl.filters.with_project(work.id).toggle_tag("home")
    press(ctl, "a")
    type_text(ctl, "Filtered")
    press(ctl, "enter")
    task = ctl.current_task()
    assert task.project_id == work.id
    assert task.tag_ids == ["home"]


def test_add_subtask_expands_parent(store, make_controller, press, type_text):
    store.create_task("parent")
    ctl = make_controller()
    press(ctl, "s")
    assert ctl.mode == Mode.ADD_SUBTASK
    type_text(ctl, "step one")
    press(ctl, "enter")
    assert titles(ctl) == ["parent", "step one"]
    assert ctl.current_task().is_subtask
    press(ctl, "s")
    assert ctl.mode == Mode.NORMAL
    assert ctl.current_status_message() != ""


def test_collapse_moves_cursor_to_parent(store, make_controller, press):
    parent = store.create_task("parent", priority=Priority.HIGH)
    store.create_task("child", parent_id=parent.id)
    store.create_task("other")
    ctl = make_controller()
    press(ctl, "E", "j")
    assert ctl.current_task().title == "child"
    press(ctl, "C")
    assert titles(ctl) == ["parent", "other"]
    assert ctl.current_task().title == "parent"


def test_expand_without_subtasks_reports(store, make_controller, press):
    store.create_task("lonely")
    ctl = make_controller()
    press(ctl, "o")
    assert ctl.current_status_message() == "No subtasks to expand"


def test_edit_title(store, make_controller, press, type_text):
    store.create_task("old title")
    ctl = make_controller()
    press(ctl, "enter")
    assert ctl.input_text == "old title"
    press(ctl, "c-u")
    type_text(ctl, "new title")
    press(ctl, "enter")
    assert titles(ctl) == ["new title"]
    press(ctl, "c-z")
    assert titles(ctl) == ["old title"]


def test_edit_escape_keeps_title(store, make_controller, press):
    store.create_task("keep")
    ctl = make_controller()
    press(ctl, "enter", "backspace", "escape")
    assert ctl.mode == Mode.NORMAL
    assert titles(ctl) == ["keep"]


def test_search_filters_live_and_escape_restores(store, make_controller, press, type_text):
    store.create_task("Buy milk")
    store.create_task("Fix bike")
    store.create_task("Call bank")
    ctl = make_controller()
    press(ctl, "/")
    type_text(ctl, "bi")
    assert titles(ctl) == ["Fix bike"]
    press(ctl, "escape")
    assert len(ctl.tasks) == 3
    assert ctl.filters.text == ""

    press(ctl, "/")
    type_text(ctl, "b")
    press(ctl, "enter")
    assert ctl.search_committed == "b"
    press(ctl, "/", "i", "escape")
    assert ctl.filters.text == "b"
    assert sorted(titles(ctl)) == ["Buy milk", "Call bank", "Fix bike"]


def test_confirm_delete_accepts_only_yes_or_no(store, make_controller, press):
    store.create_task("A", priority=Priority.HIGH)
    store.create_task("B")
    ctl = make_controller()
    press(ctl, "d")
    assert ctl.mode == Mode.CONFIRM_DELETE
    press(ctl, "x", "enter")
    assert ctl.mode == Mode.CONFIRM_DELETE
    press(ctl, "n")
    assert ctl.mode == Mode.NORMAL
    assert titles(ctl) == ["A", "B"]
    press(ctl, "d", "Y")
    assert titles(ctl) == ["B"]
    assert ctl.current_status_message() == "Deleted 1 task(s)"
    press(ctl, "c-z")
    assert titles(ctl) == ["A", "B"]


def test_delete_parent_takes_subtasks_and_undo_restores(store, make_controller, press):
    parent = store.create_task("parent")
    store.create_task("child", parent_id=parent.id)
    ctl = make_controller()
    press(ctl, "o", "V", "d", "y")
    assert ctl.tasks == []
    press(ctl, "c-z")
    assert titles(ctl) == ["parent"]
    assert [sub.title for sub in ctl.tasks[0].subtasks] == ["child"]


def test_undo_delete_restores_dependencies_on_the_deleted_task(store, make_controller, press):
    a = store.create_task("A", priority=Priority.HIGH)
    b = store.create_task("B")
    store.add_dependency(a.id, b.id)
    ctl = make_controller()
    assert ctl.blocked.get(a.id) is True
    press(ctl, "j", "d", "y")
    assert titles(ctl) == ["A"]
    assert not ctl.blocked.get(a.id)
    press(ctl, "c-z")
    assert titles(ctl) == ["A", "B"]
    assert ctl.blocked.get(a.id) is True
    assert [dep.title for dep in store.get_dependencies(a.id)] == ["B"]
    press(ctl, "c-y")
    assert titles(ctl) == ["A"]
    assert store.get_dependencies(a.id) == []


def test_undo_bulk_delete_keeps_links_between_deleted_tasks(store, make_controller, press):
    a = store.create_task("A", priority=Priority.HIGH)
    b = store.create_task("B")
    store.add_dependency(a.id, b.id)
    ctl = make_controller()
    press(ctl, "V", "d", "y")
    assert ctl.tasks == []
    press(ctl, "c-z")
    assert titles(ctl) == ["A", "B"]
    assert ctl.blocked.get(a.id) is True


def test_view_mode_cycle_and_active_toggle(store, make_controller, press):
    done = store.create_task("done")
    store.set_status(done.id, Status.DONE)
    store.create_task("open")
    ctl = make_controller()
    press(ctl, "A")
    assert ctl.view_mode == ViewMode.ACTIVE
    assert titles(ctl) == ["open"]
    press(ctl, "A")
    assert ctl.view_mode == ViewMode.ALL
    press(ctl, "H", "H")
    assert ctl.view_mode == ViewMode.RECENT
    # completed just now counts as recent
    assert titles(ctl) == ["open", "done"]


def test_reload_failure_keeps_previous_state(store, make_controller, press, monkeypatch):
    store.create_task("A")
    ctl = make_controller()

    def broken():
        raise StoreError("locked")

    monkeypatch.setattr(store, "list_tags", broken)
    press(ctl, "r")
    assert titles(ctl) == ["A"]
    assert "locked" in ctl.current_status_message()


def test_stale_selection_pruned_after_reload(store, make_controller, press):
    a = store.create_task("A")
    ctl = make_controller()
    press(ctl, "space")
    store.delete_task(a.id)
    press(ctl, "r")
    assert ctl.selected == set()
    assert ctl.cursor == 0


def test_timer_resumes_on_start(store, make_controller):
    task = store.create_task("tracked")
    store.start_time_entry(task.id)
    ctl = make_controller()
    assert ctl.timer is not None
    assert ctl.timer.task_title == "tracked"


def test_tick_reschedules_only_for_current_generation(store, make_controller):
    task = store.create_task("tracked")
    store.start_time_entry(task.id)
    ctl = make_controller()
    result = ctl.update(TrackingTick(ctl.timer_generation))
    assert isinstance(result, TimerEffect)
    assert ctl.update(TrackingTick(ctl.timer_generation - 1)) is None


def test_wrap_toggle(make_controller, press):
    ctl = make_controller()
    press(ctl, "w")
    assert ctl.text_wrap
    press(ctl, "w")
    assert not ctl.text_wrap


def test_input_mode_flag(store, make_controller, press):
    store.create_task("A")
    ctl = make_controller()
    assert not ctl.is_input_mode()
    press(ctl, ":")
    assert ctl.is_input_mode()
    press(ctl, "escape", "m")
    assert ctl.selector is not None
    assert ctl.is_input_mode()
