"""Selector mixin: project/tag/dependency/parent pickers and the filter pickers."""

from typing import TYPE_CHECKING, List, Optional, Set

from application.history import ActionKind, update_action
from application.ports import TaskStore
from application.task_filters import TaskFilters
from core import Project, Tag, Task, validate_new_dependency
from interface.messages import Result
from interface.selectors import Selector, SelectorItem, SelectorKind

if TYPE_CHECKING:
    from application.history import UndoHistory

ALL_PROJECTS_KEY = ""
CLEAR_TAGS_KEY = ""
REMOVE_PARENT_KEY = ""


class SelectorMixin:
    """Mixin providing the modal pickers layered over Normal mode."""

    selector: Optional[Selector]
    store: TaskStore
    all_tasks: List[Task]
    projects: List[Project]
    tags: List[Tag]
    filters: TaskFilters
    expanded: Set[str]
    history: "UndoHistory"

    # ---- opening ----

    def open_project_selector(self) -> Result:
        targets = self.target_tasks()
        if not targets:
            self.set_status_message(self._t("STATUS_NO_TASK"))
            return None
        if not self.projects:
            self.set_status_message(self._t("STATUS_NO_PROJECTS"))
            return None
        items = [SelectorItem(p.id, p.name, p.color) for p in self.projects]
        ids = tuple(task.id for task in targets)
        self.selector = Selector(
            SelectorKind.PROJECT_ASSIGN,
            items,
            title=self._t("SELECTOR_PROJECT_ASSIGN", count=len(ids)),
            task_ids=ids,
            is_checked=lambda key: self._all_in_project(ids, key),
        )
        return None

    def open_tag_selector(self) -> Result:
        targets = self.target_tasks()
        if not targets:
            self.set_status_message(self._t("STATUS_NO_TASK"))
            return None
        if not self.tags:
            self.set_status_message(self._t("STATUS_NO_TAGS_HINT"))
            return None
        items = [SelectorItem(tag.id, tag.display_name, tag.color) for tag in self.tags]
        ids = tuple(task.id for task in targets)
        self.selector = Selector(
            SelectorKind.TAG_TOGGLE,
            items,
            title=self._t("SELECTOR_TAG_TOGGLE", count=len(ids)),
            task_ids=ids,
            is_checked=lambda key: self._all_have_tag(ids, key),
        )
        return None

    def open_dependency_selector(self) -> Result:
        task = self.current_task()
        if task is None:
            self.set_status_message(self._t("STATUS_NO_TASK"))
            return None
        if task.is_subtask:
            self.set_status_message(self._t("STATUS_SUBTASK_NO_DEPENDENCIES"))
            return None
        candidates = [other for other in self.all_tasks if other.id != task.id]
        if not candidates:
            self.set_status_message(self._t("STATUS_NO_DEPENDENCY_CANDIDATES"))
            return None
        task_id = task.id
        self.selector = Selector(
            SelectorKind.DEPENDENCY_TOGGLE,
            [SelectorItem(other.id, other.title) for other in candidates],
            title=self._t("SELECTOR_DEPENDENCIES", title=task.title),
            task_ids=(task_id,),
            is_checked=lambda key: self._task_depends_on(task_id, key),
        )
        return None

    def open_project_filter(self) -> Result:
        items = [SelectorItem(p.id, p.name, p.color) for p in self.projects]
        self.selector = Selector(
            SelectorKind.PROJECT_FILTER,
            items,
            title=self._t("SELECTOR_PROJECT_FILTER"),
            sentinel=SelectorItem(ALL_PROJECTS_KEY, self._t("SELECTOR_ALL_PROJECTS"), sentinel=True),
            is_checked=lambda key: self.filters.project_id == key,
        )
        return None

    def open_tag_filter(self) -> Result:
        if not self.tags:
            self.set_status_message(self._t("STATUS_NO_TAGS_HINT"))
            return None
        items = [SelectorItem(tag.id, tag.display_name, tag.color) for tag in self.tags]
        self.selector = Selector(
            SelectorKind.TAG_FILTER,
            items,
            title=self._t("SELECTOR_TAG_FILTER"),
            sentinel=SelectorItem(CLEAR_TAGS_KEY, self._t("SELECTOR_CLEAR_TAGS"), sentinel=True),
            is_checked=lambda key: key in self.filters.tag_ids,
        )
        return None

    def open_parent_selector(self) -> Result:
        task = self.current_task()
        if task is None:
            self.set_status_message(self._t("STATUS_NO_TASK"))
            return None
        if task.has_subtasks:
            self.set_status_message(self._t("STATUS_PARENT_HAS_SUBTASKS"))
            return None
        if task.dependencies:
            self.set_status_message(self._t("STATUS_PARENT_HAS_DEPENDENCIES"))
            return None
        candidates = [other for other in self.all_tasks if other.id != task.id]
        if not candidates:
            self.set_status_message(self._t("STATUS_NO_PARENT_CANDIDATES"))
            return None
        sentinel = None
        if task.parent_id:
            sentinel = SelectorItem(REMOVE_PARENT_KEY, self._t("SELECTOR_REMOVE_PARENT"), sentinel=True)
        task_id = task.id
        self.selector = Selector(
            SelectorKind.PARENT_ASSIGN,
            [SelectorItem(other.id, other.title) for other in candidates],
            title=self._t("SELECTOR_PARENT", title=task.title),
            sentinel=sentinel,
            task_ids=(task_id,),
            is_checked=lambda key: self._task_has_parent(task_id, key),
        )
        return None

    # ---- key handling ----

    def close_selector(self) -> None:
        self.selector = None

    def _handle_selector_key(self, key: str) -> Result:
        selector = self.selector
        if selector is None:
            return None
        if key == "escape":
            self.close_selector()
            return None
        if key in ("up", "c-p"):
            selector.move(-1)
            return None
        if key in ("down", "c-n"):
            selector.move(1)
            return None
        if key in ("backspace", "c-h"):
            selector.backspace()
            return None
        if key == "enter":
            item = selector.current()
            if item is None:
                return None
            if not selector.kind.toggles:
                self.close_selector()
            return self._choose_selector_item(selector, item)
        selector.type_char(" " if key == "space" else key)
        return None

    def _choose_selector_item(self, selector: Selector, item: SelectorItem) -> Result:
        kind = selector.kind
        if kind == SelectorKind.PROJECT_ASSIGN:
            return self._assign_project(selector.task_ids, item.key)
        if kind == SelectorKind.TAG_TOGGLE:
            return self._toggle_tag(selector.task_ids, item.key)
        if kind == SelectorKind.DEPENDENCY_TOGGLE:
            return self._toggle_dependency(selector.task_ids[0], item.key)
        if kind == SelectorKind.PROJECT_FILTER:
            return self._filter_by_project(None if item.sentinel else item.key)
        if kind == SelectorKind.TAG_FILTER:
            return self._filter_by_tag(None if item.sentinel else item.key)
        if kind == SelectorKind.PARENT_ASSIGN:
            return self._assign_parent(selector.task_ids[0], None if item.sentinel else item.key)
        return None

    # ---- outcomes ----

    def _all_in_project(self, task_ids, project_id: str) -> bool:
        tasks = [self.find_task(tid) for tid in task_ids]
        return bool(tasks) and all(task is not None and task.project_id == project_id for task in tasks)

    def _task_depends_on(self, task_id: str, other_id: str) -> bool:
        task = self.find_task(task_id)
        return task is not None and task.depends_on(other_id)

    def _task_has_parent(self, task_id: str, parent_id: str) -> bool:
        task = self.find_task(task_id)
        return task is not None and task.parent_id == parent_id

    def _all_have_tag(self, task_ids, tag_id: str) -> bool:
        tasks = [self.find_task(tid) for tid in task_ids]
        return bool(tasks) and all(task is not None and task.has_tag(tag_id) for task in tasks)

    def _assign_project(self, task_ids, project_id: str) -> Result:
        project = next((p for p in self.projects if p.id == project_id), None)
        targets = [t for t in (self.find_task(tid) for tid in task_ids) if t is not None]
        targets = [t for t in targets if t.project_id != project_id]
        if project is None or not targets:
            return None
        return self._move_to_project(targets, project)

    def _toggle_tag(self, task_ids, tag_id: str) -> Result:
        tag = next((t for t in self.tags if t.id == tag_id), None)
        if tag is None:
            return None
        ids = list(task_ids)
        if self._all_have_tag(ids, tag_id):
            message = self._t("STATUS_TAG_REMOVED", tag=tag.name, count=len(ids))

            def work(store: TaskStore) -> None:
                for task_id in ids:
                    store.remove_tag_from_task(task_id, tag_id)

        else:
            message = self._t("STATUS_TAG_ADDED", tag=tag.name, count=len(ids))

            def work(store: TaskStore) -> None:
                for task_id in ids:
                    store.add_tag_to_task(task_id, tag_id)

        return self.mutation_effect(work, message=message)

    def _toggle_dependency(self, task_id: str, depends_on_id: str) -> Result:
        task = self.find_task(task_id)
        other = self.find_task(depends_on_id)
        if task is None or other is None:
            return None
        if task.depends_on(depends_on_id):
            return self.mutation_effect(
                lambda store: store.remove_dependency(task_id, depends_on_id),
                message=self._t("STATUS_DEPENDENCY_REMOVED", title=other.title),
            )
        error = validate_new_dependency(task, other, self.all_tasks)
        if error is not None:
            key = "STATUS_DEPENDENCY_CYCLE" if error.error_type == "cycle" else "STATUS_DEPENDENCY_INVALID"
            self.set_status_message(self._t(key, details=error.details))
            return None
        return self.mutation_effect(
            lambda store: store.add_dependency(task_id, depends_on_id),
            message=self._t("STATUS_DEPENDENCY_ADDED", title=other.title),
        )

    def _filter_by_project(self, project_id: Optional[str]) -> Result:
        self.filters = self.filters.with_project(project_id)
        self.cursor = 0
        self.apply_filters()
        return None

    def _filter_by_tag(self, tag_id: Optional[str]) -> Result:
        if tag_id is None:
            self.filters = self.filters.without_tags()
        else:
            self.filters = self.filters.toggle_tag(tag_id)
        self.cursor = 0
        self.apply_filters()
        return None

    def _assign_parent(self, task_id: str, parent_id: Optional[str]) -> Result:
        task = self.find_task(task_id)
        if task is None or task.parent_id == parent_id:
            return None
        if parent_id and task.dependencies:
            self.set_status_message(self._t("STATUS_PARENT_HAS_DEPENDENCIES"))
            return None
        changed = task.snapshot()
        changed.parent_id = parent_id
        action = update_action([task], [changed], "parent", kind=ActionKind.SET_PARENT)
        self.history.push(action)
        if parent_id:
            self.expanded.add(parent_id)
            parent = self.find_task(parent_id)
            message = self._t("STATUS_PARENT_SET", title=parent.title if parent else parent_id)
        else:
            message = self._t("STATUS_PARENT_REMOVED")
        return self.mutation_effect(
            lambda store: store.set_parent(task_id, parent_id),
            action=action,
            message=message,
        )


__all__ = ["SelectorMixin", "ALL_PROJECTS_KEY", "CLEAR_TAGS_KEY", "REMOVE_PARENT_KEY"]
