from core import Priority
from interface.selectors import SelectorKind


def titles(ctl):
    return [task.title for task in ctl.tasks]


def test_project_selector_moves_and_closes(store, make_controller, press, type_text):
    store.create_task("A")
    work = store.create_project("Work", "#fff")
    ctl = make_controller()
    press(ctl, "m")
    assert ctl.selector.kind == SelectorKind.PROJECT_ASSIGN
    type_text(ctl, "wo")
    assert ctl.selector.current().label == "Work"
    press(ctl, "enter")
    assert ctl.selector is None
    assert ctl.tasks[0].project_id == work.id
    press(ctl, "c-z")
    assert ctl.tasks[0].project_id == "inbox"


def test_space_is_typed_into_the_query(store, make_controller, press, type_text):
    store.create_task("A")
    store.create_project("Side project", "#fff")
    store.create_project("Sidecar", "#fff")
    ctl = make_controller()
    press(ctl, "m")
    type_text(ctl, "side p")
    assert [item.label for item in ctl.selector.visible_items()] == ["Side project"]
    press(ctl, "backspace", "backspace")
    assert len(ctl.selector.visible_items()) == 2


def test_tag_selector_toggles_and_stays_open(store, make_controller, press):
    store.create_task("A")
    store.create_tag("home", "")
    ctl = make_controller()
    press(ctl, "t", "enter")
    assert ctl.selector is not None
    assert ctl.tasks[0].tag_ids == ["home"]
    assert ctl.selector.is_checked(ctl.selector.current())
    press(ctl, "enter")
    assert ctl.tasks[0].tag_ids == []
    press(ctl, "escape")
    assert ctl.selector is None


def test_tag_selector_needs_tags(store, make_controller, press):
    store.create_task("A")
    ctl = make_controller()
    press(ctl, "t")
    assert ctl.selector is None
    assert ctl.current_status_message().startswith("No tags yet")


def test_dependency_toggle_and_cycle_rejection(store, make_controller, press):
    store.create_task("A", priority=Priority.HIGH)
    store.create_task("B")
    ctl = make_controller()
    press(ctl, "b", "enter")
    a, b = ctl.tasks
    assert a.depends_on(b.id)
    assert ctl.blocked == {a.id: True}
    press(ctl, "escape", "j", "b", "enter")
    assert ctl.current_status_message().startswith("Dependency would create a cycle")
    assert not ctl.find_task(b.id).dependencies
    press(ctl, "escape", "k", "b", "enter")
    assert not ctl.find_task(a.id).dependencies


def test_subtasks_cannot_take_dependencies(store, make_controller, press):
    parent = store.create_task("parent")
    store.create_task("child", parent_id=parent.id)
    ctl = make_controller()
    press(ctl, "o", "j", "b")
    assert ctl.selector is None
    assert ctl.current_status_message() == "Subtasks cannot have dependencies"


def test_project_filter_with_all_projects_sentinel(store, make_controller, press):
    work = store.create_project("Work", "#fff")
    store.create_task("inbox task")
    store.create_task("work task", project_id=work.id)
    ctl = make_controller()
    press(ctl, "M")
    assert ctl.selector.current().sentinel
    press(ctl, "down", "down", "enter")
    assert ctl.selector is None
    assert ctl.filters.project_id == work.id
    assert titles(ctl) == ["work task"]
    press(ctl, "M", "enter")
    assert ctl.filters.project_id is None
    assert len(ctl.tasks) == 2


def test_tag_filter_requires_every_tag(store, make_controller, press):
    store.create_tag("a", "")
    store.create_tag("b", "")
    store.create_task("both", tag_ids=["a", "b"])
    store.create_task("only a", tag_ids=["a"])
    ctl = make_controller()
    press(ctl, "T", "down", "enter")
    assert ctl.selector is not None
    assert sorted(titles(ctl)) == ["both", "only a"]
    press(ctl, "down", "enter")
    assert titles(ctl) == ["both"]
    press(ctl, "up", "up", "enter")
    assert ctl.filters.tag_ids == ()
    press(ctl, "escape")
    assert ctl.selector is None


def test_parent_selector_nests_and_unnests(store, make_controller, press):
    store.create_task("A", priority=Priority.HIGH)
    store.create_task("B")
    ctl = make_controller()
    press(ctl, "j", "P")
    assert ctl.selector.kind == SelectorKind.PARENT_ASSIGN
    assert ctl.selector.current().label == "A"
    press(ctl, "enter")
    assert titles(ctl) == ["A", "B"]
    assert ctl.tasks[1].parent_id == ctl.tasks[0].id
    press(ctl, "j", "P")
    assert ctl.selector.current().sentinel
    press(ctl, "enter")
    assert all(not task.is_subtask for task in ctl.tasks)
    press(ctl, "c-z")
    assert [t.title for t in ctl.all_tasks[0].subtasks] == ["B"]


def test_parent_selector_refuses_parents(store, make_controller, press):
    parent = store.create_task("parent", priority=Priority.HIGH)
    store.create_task("child", parent_id=parent.id)
    store.create_task("other")
    ctl = make_controller()
    press(ctl, "P")
    assert ctl.selector is None
    assert ctl.current_status_message() == "A task with subtasks cannot become a subtask"


def test_parent_selector_refuses_tasks_with_dependencies(store, make_controller, press):
    a = store.create_task("A", priority=Priority.HIGH)
    b = store.create_task("B")
    store.create_task("C", priority=Priority.LOW)
    store.add_dependency(a.id, b.id)
    ctl = make_controller()
    press(ctl, "P")
    assert ctl.selector is None
    assert ctl.current_status_message() == "A task with dependencies cannot become a subtask"
    assert all(not task.is_subtask for task in ctl.all_tasks)
    assert [dep.title for dep in store.get_dependencies(a.id)] == ["B"]
