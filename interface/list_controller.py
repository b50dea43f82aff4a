"""Primary list controller: working task set, view state and the input mode machine.

Key handlers and `update` never touch the store directly. They return
effects (see interface.messages) that the host runs one at a time and
whose resulting messages come back through `update` on the same loop.
"""

import logging
import time
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Set

from application.history import (
    MAX_HISTORY_SIZE,
    ActionKind,
    UndoAction,
    UndoHistory,
    apply_redo,
    apply_undo,
    create_action,
    delete_action,
    update_action,
)
from application.commands import CommandDef
from application.dates import format_duration
from application.flatten import flatten_tasks
from application.loader import LoadError, load_snapshot
from application.ports import StoreError, TaskStore
from application.task_filters import SortKey, TaskFilters, ViewMode, filter_tasks, sort_tasks
from core import INBOX_PROJECT_ID, Project, Tag, Task
from interface.i18n import translate
from interface.list_commands import CommandMixin
from interface.list_modes import Mode
from interface.list_selectors import SelectorMixin
from interface.messages import (
    Effect,
    Message,
    PriorityChanged,
    Result,
    TaskCreated,
    TasksLoaded,
    TaskUpdated,
    TimeLogged,
    TimerEffect,
    TimerStarted,
    TimerStopped,
    TrackingTick,
    batch,
)
from interface.selectors import Selector
from interface.tui_themes import DEFAULT_THEME

logger = logging.getLogger("klonch.controller")

TICK_INTERVAL = 1.0


@dataclass
class ActiveTimer:
    entry_id: str
    task_id: str
    task_title: str
    started_at: datetime

    def elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        return max(0, int(((now or datetime.now()) - self.started_at).total_seconds()))


class ListController(CommandMixin, SelectorMixin):
    """Owns ViewState and routes keys by mode."""

    def __init__(
        self,
        store: TaskStore,
        *,
        view_mode: ViewMode = ViewMode.ALL,
        undo_limit: int = MAX_HISTORY_SIZE,
        theme: str = DEFAULT_THEME,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.clock = clock or datetime.now

        self.all_tasks: List[Task] = []
        self.tasks: List[Task] = []
        self.projects: List[Project] = []
        self.tags: List[Tag] = []
        self.blocked: Dict[str, bool] = {}
        self.loaded = False

        self.cursor = 0
        self.scroll_offset = 0
        self.viewport_height = 20
        self.selected: Set[str] = set()
        self.expanded: Set[str] = set()
        self.view_mode = view_mode
        self.filters = TaskFilters()
        self.sort_key = SortKey.PRIORITY
        self.text_wrap = False
        self.theme_name = theme

        self.mode = Mode.NORMAL
        self.selector: Optional[Selector] = None
        self.input_text = ""
        self.search_committed = ""
        self.editing_task_id: Optional[str] = None
        self.subtask_parent_id: Optional[str] = None
        self.delete_ids: List[str] = []
        self.cmd_suggestions: List[CommandDef] = []
        self.cmd_cursor = 0

        self.history = UndoHistory(undo_limit)
        self.resort_pending_id: Optional[str] = None
        self.focus_task_id: Optional[str] = None

        self.timer: Optional[ActiveTimer] = None
        self.timer_generation = 0

        self.status_message = ""
        self.status_message_expires = 0.0

        self._mode_handlers: Dict[Mode, Callable[[str], Result]] = {
            Mode.NORMAL: self._handle_normal_key,
            Mode.ADD: self._handle_add_key,
            Mode.ADD_SUBTASK: self._handle_add_key,
            Mode.EDIT: self._handle_edit_key,
            Mode.SEARCH: self._handle_search_key,
            Mode.COMMAND: self._handle_command_key,
            Mode.CONFIRM_DELETE: self._handle_confirm_delete_key,
        }

    # ---- public surface used by the host ----

    def _t(self, message_id: str, **kwargs) -> str:
        return translate(message_id, **kwargs)

    def start(self) -> Result:
        """Initial effects: load tasks and resume a timer left running."""
        return batch(self.reload_effect(), self._resume_timer_effect())

    def is_input_mode(self) -> bool:
        """True while keys must not fall through to global bindings such as quit."""
        return self.mode != Mode.NORMAL or self.selector is not None

    def handle_key(self, key: str) -> Result:
        if self.selector is not None:
            return self._handle_selector_key(key)
        return self._mode_handlers[self.mode](key)

    def set_viewport(self, height: int) -> None:
        self.viewport_height = max(1, height)
        self._ensure_cursor_visible()

    def set_status_message(self, message: str, ttl: float = 4.0) -> None:
        self.status_message = message
        self.status_message_expires = time.time() + ttl

    def current_status_message(self) -> str:
        if self.status_message and time.time() < self.status_message_expires:
            return self.status_message
        return ""

    def current_task(self) -> Optional[Task]:
        if 0 <= self.cursor < len(self.tasks):
            return self.tasks[self.cursor]
        return None

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.all_tasks:
            if task.id == task_id:
                return task
            for sub in task.subtasks:
                if sub.id == task_id:
                    return sub
        return None

    def get_target_ids(self) -> List[str]:
        """Selected ids if any (display order first), else the cursor task, else nothing."""
        if self.selected:
            ordered = [task.id for task in self.tasks if task.id in self.selected]
            hidden = sorted(self.selected.difference(ordered))
            return ordered + hidden
        task = self.current_task()
        return [task.id] if task else []

    def target_tasks(self) -> List[Task]:
        return [task for task in (self.find_task(tid) for tid in self.get_target_ids()) if task is not None]

    # ---- messages ----

    def update(self, msg: Message) -> Result:
        if isinstance(msg, TasksLoaded):
            return self._on_tasks_loaded(msg)
        if isinstance(msg, TaskCreated):
            return self._on_task_created(msg)
        if isinstance(msg, TaskUpdated):
            return self._on_task_updated(msg)
        if isinstance(msg, PriorityChanged):
            return self._on_priority_changed(msg)
        if isinstance(msg, TimerStarted):
            return self._on_timer_started(msg)
        if isinstance(msg, TimerStopped):
            return self._on_timer_stopped(msg)
        if isinstance(msg, TimeLogged):
            return self._on_time_logged(msg)
        if isinstance(msg, TrackingTick):
            return self._on_tick(msg)
        logger.debug("ignored message %r", msg)
        return None

    def _on_tasks_loaded(self, msg: TasksLoaded) -> Result:
        if msg.error or msg.result is None:
            # keep whatever was on screen
            self.set_status_message(self._t("STATUS_LOAD_FAILED", error=msg.error or "?"), ttl=6)
            return None
        result = msg.result
        self.all_tasks = result.tasks
        self.projects = result.projects
        self.tags = result.tags
        self.blocked = result.blocked
        self.loaded = True

        known: Set[str] = set()
        parents: Set[str] = set()
        for task in self.all_tasks:
            known.add(task.id)
            if task.subtasks:
                parents.add(task.id)
            known.update(sub.id for sub in task.subtasks)
        self.selected &= known
        self.expanded &= parents
        closing: Result = None
        if self.timer is not None and self.timer.task_id not in known:
            # tracked task was deleted or archived
            self.set_status_message(self._t("STATUS_TIMER_DROPPED", title=self.timer.task_title))
            closing = self._close_orphaned_entry_effect(self.timer.entry_id)
            self.timer = None
            self.timer_generation += 1
        if self.filters.project_id and not any(p.id == self.filters.project_id for p in self.projects):
            self.filters = self.filters.with_project(None)
        known_tags = {tag.id for tag in self.tags}
        if any(tag_id not in known_tags for tag_id in self.filters.tag_ids):
            self.filters = replace(self.filters, tag_ids=tuple(t for t in self.filters.tag_ids if t in known_tags))

        self.apply_filters()
        if self.focus_task_id:
            focus = self.focus_task_id
            self.focus_task_id = None
            for idx, task in enumerate(self.tasks):
                if task.id == focus:
                    self.cursor = idx
                    # a fresh task stays put until the cursor leaves it
                    self.resort_pending_id = focus
                    break
        self._clamp_cursor()
        return closing

    def _on_task_created(self, msg: TaskCreated) -> Result:
        if msg.error:
            self.history.discard(msg.action)
            self.set_status_message(self._t("STATUS_ERROR", error=msg.error), ttl=6)
            return self.reload_effect()
        self.focus_task_id = msg.task_id
        self.set_status_message(self._t("STATUS_TASK_CREATED"))
        return self.reload_effect()

    def _on_task_updated(self, msg: TaskUpdated) -> Result:
        if msg.error:
            self.history.discard(msg.action)
            self.set_status_message(self._t("STATUS_ERROR", error=msg.error), ttl=6)
        elif msg.message:
            self.set_status_message(msg.message)
        return self.reload_effect()

    def _on_priority_changed(self, msg: PriorityChanged) -> Result:
        if msg.error:
            self.history.discard(msg.action)
            self.set_status_message(self._t("STATUS_ERROR", error=msg.error), ttl=6)
            return self.reload_effect()
        task = self.find_task(msg.task_id)
        if task is not None:
            task.priority = msg.priority
        # overwrite any earlier marker without resolving it
        self.resort_pending_id = msg.task_id
        self.set_status_message(self._t("STATUS_PRIORITY_DEFERRED", priority=msg.priority.code))
        return None

    def _on_timer_started(self, msg: TimerStarted) -> Result:
        if msg.error:
            self.set_status_message(self._t("STATUS_ERROR", error=msg.error), ttl=6)
            return None
        if msg.entry is None:
            return None
        self.timer = ActiveTimer(
            entry_id=msg.entry.id,
            task_id=msg.entry.task_id,
            task_title=msg.task_title,
            started_at=msg.entry.started_at,
        )
        self.timer_generation += 1
        if msg.stopped_minutes is not None:
            self.set_status_message(
                self._t(
                    "STATUS_TIMER_SWITCHED",
                    duration=format_duration(msg.stopped_minutes),
                    previous=msg.stopped_title,
                    title=msg.task_title,
                )
            )
        elif not msg.resumed:
            self.set_status_message(self._t("STATUS_TIMER_STARTED", title=msg.task_title))
        return TimerEffect(TICK_INTERVAL, TrackingTick(self.timer_generation))

    def _on_timer_stopped(self, msg: TimerStopped) -> Result:
        if msg.error:
            self.set_status_message(self._t("STATUS_ERROR", error=msg.error), ttl=6)
            return None
        self.timer = None
        self.timer_generation += 1
        self.set_status_message(self._t("STATUS_TIMER_STOPPED", duration=format_duration(msg.minutes), title=msg.task_title))
        return None

    def _on_time_logged(self, msg: TimeLogged) -> Result:
        if msg.error:
            self.set_status_message(self._t("STATUS_ERROR", error=msg.error), ttl=6)
            return None
        self.set_status_message(self._t("STATUS_TIME_LOGGED", duration=format_duration(msg.minutes), title=msg.task_title))
        return None

    def _on_tick(self, msg: TrackingTick) -> Result:
        if self.timer is None or msg.generation != self.timer_generation:
            return None
        return TimerEffect(TICK_INTERVAL, TrackingTick(msg.generation))

    # ---- effects ----

    def reload_effect(self) -> Effect:
        store = self.store

        def run() -> Message:
            try:
                return TasksLoaded(result=load_snapshot(store))
            except LoadError as exc:
                return TasksLoaded(error=str(exc))

        return run

    def mutation_effect(
        self,
        work: Callable[[TaskStore], None],
        *,
        action: Optional[UndoAction] = None,
        message: str = "",
    ) -> Effect:
        """Run `work` against the store and report a TaskUpdated either way."""
        store = self.store

        def run() -> Message:
            try:
                work(store)
            except StoreError as exc:
                logger.warning("mutation failed: %s", exc)
                return TaskUpdated(error=str(exc), action=action)
            return TaskUpdated(action=action, message=message)

        return run

    def _resume_timer_effect(self) -> Effect:
        store = self.store

        def run() -> Optional[Message]:
            try:
                entry = store.get_active_time_entry()
                if entry is None:
                    return None
                task = store.get_task(entry.task_id)
            except StoreError as exc:
                return TimerStarted(error=str(exc))
            return TimerStarted(entry=entry, task_title=task.title if task else "", resumed=True)

        return run

    def _close_orphaned_entry_effect(self, entry_id: str) -> Effect:
        store = self.store

        def run() -> None:
            try:
                store.stop_time_entry(entry_id)
            except StoreError as exc:
                # deleting the task removed the entry as well
                logger.debug("time entry %s not closed: %s", entry_id, exc)

        return run

    # ---- view derivation ----

    def apply_filters(self, keep_task_id: Optional[str] = None) -> None:
        """Recompute the rendered sequence: filter, sort, flatten."""
        visible = filter_tasks(self.all_tasks, self.view_mode, self.filters, now=self.clock())
        visible = sort_tasks(visible, self.sort_key)
        self.tasks = flatten_tasks(visible, self.expanded)
        if keep_task_id:
            for idx, task in enumerate(self.tasks):
                if task.id == keep_task_id:
                    self.cursor = idx
                    break
        self._clamp_cursor()

    def _clamp_cursor(self) -> None:
        if not self.tasks:
            self.cursor = 0
            self.scroll_offset = 0
            return
        self.cursor = max(0, min(self.cursor, len(self.tasks) - 1))
        self._ensure_cursor_visible()

    def _ensure_cursor_visible(self) -> None:
        height = max(1, self.viewport_height)
        if self.cursor < self.scroll_offset:
            self.scroll_offset = self.cursor
        elif self.cursor >= self.scroll_offset + height:
            self.scroll_offset = self.cursor - height + 1
        max_offset = max(0, len(self.tasks) - height)
        self.scroll_offset = max(0, min(self.scroll_offset, max_offset))

    # ---- cursor and deferred resort ----

    def set_cursor(self, index: int) -> Result:
        if not self.tasks:
            self.cursor = 0
            return None
        old = self.cursor
        self.cursor = max(0, min(index, len(self.tasks) - 1))
        self._ensure_cursor_visible()
        if self.cursor == old:
            return None
        return self._check_deferred_resort(old)

    def move_cursor(self, delta: int) -> Result:
        return self.set_cursor(self.cursor + delta)

    def _check_deferred_resort(self, old_cursor: int) -> Result:
        """Reload when the cursor leaves the resort-pending row."""
        if not self.resort_pending_id:
            return None
        if 0 <= old_cursor < len(self.tasks) and self.tasks[old_cursor].id == self.resort_pending_id:
            self.resort_pending_id = None
            return self.reload_effect()
        return None

    # ---- text input ----

    def _edit_input(self, key: str) -> bool:
        """Line editing shared by the text modes; False when the key is not an edit."""
        if key in ("backspace", "c-h"):
            self.input_text = self.input_text[:-1]
            return True
        if key == "c-u":
            self.input_text = ""
            return True
        if key == "space":
            self.input_text += " "
            return True
        if len(key) == 1 and key.isprintable():
            self.input_text += key
            return True
        return False

    def _enter_mode(self, mode: Mode, text: str = "") -> None:
        self.mode = mode
        self.input_text = text

    def _back_to_normal(self) -> None:
        self.mode = Mode.NORMAL
        self.input_text = ""
        self.editing_task_id = None
        self.subtask_parent_id = None
        self.delete_ids = []
        self.cmd_suggestions = []
        self.cmd_cursor = 0

    # ---- Normal mode ----

    def _handle_normal_key(self, key: str) -> Result:
        half_page = max(1, self.viewport_height // 2)
        if key in ("up", "k"):
            return self.move_cursor(-1)
        if key in ("down", "j"):
            return self.move_cursor(1)
        if key in ("g", "home"):
            return self.set_cursor(0)
        if key in ("G", "end"):
            return self.set_cursor(len(self.tasks) - 1)
        if key in ("pageup", "c-u"):
            return self.move_cursor(-half_page)
        if key in ("pagedown", "c-d"):
            return self.move_cursor(half_page)
        handler = {
            "space": self._toggle_selection,
            "V": self._select_all,
            "escape": self._escape_normal,
            "a": self._start_add,
            "s": self._start_add_subtask,
            "enter": self._start_edit,
            "tab": self._toggle_done,
            "d": self.request_delete,
            "p": self._cycle_priority,
            "/": self._start_search,
            ":": self._start_command,
            "m": self.open_project_selector,
            "t": self.open_tag_selector,
            "b": self.open_dependency_selector,
            "P": self.open_parent_selector,
            "M": self.open_project_filter,
            "T": self.open_tag_filter,
            "o": self._toggle_expand,
            "E": self._expand_all,
            "C": self._collapse_all,
            "H": self._cycle_view_mode,
            "A": self._toggle_active_view,
            "w": self._toggle_wrap,
            "r": self._reload,
            "c-z": self.undo,
            "c-y": self.redo,
        }.get(key)
        if handler is None:
            return None
        return handler()

    def _toggle_selection(self) -> Result:
        task = self.current_task()
        if task is None:
            return None
        if task.id in self.selected:
            self.selected.discard(task.id)
        else:
            self.selected.add(task.id)
        return None

    def _select_all(self) -> Result:
        self.selected = {task.id for task in self.tasks}
        self.set_status_message(self._t("STATUS_SELECTED_ALL", count=len(self.selected)))
        return None

    def _escape_normal(self) -> Result:
        if self.selected:
            self.selected.clear()
            self.set_status_message(self._t("STATUS_SELECTION_CLEARED"))
        elif self.filters.is_active():
            self.clear_filters()
        elif self.expanded:
            current = self.current_task()
            keep = (current.parent_id or current.id) if current else None
            self.expanded.clear()
            self.apply_filters(keep_task_id=keep)
        return None

    def clear_filters(self) -> None:
        current = self.current_task()
        self.filters = TaskFilters()
        self.search_committed = ""
        self.apply_filters(keep_task_id=current.id if current else None)
        self.set_status_message(self._t("STATUS_FILTERS_CLEARED"))

    def _start_add(self) -> Result:
        self._enter_mode(Mode.ADD)
        return None

    def _start_add_subtask(self) -> Result:
        task = self.current_task()
        if task is None:
            self.set_status_message(self._t("STATUS_NO_TASK"))
            return None
        if task.is_subtask:
            self.set_status_message(self._t("STATUS_SUBTASK_NESTING"))
            return None
        self.subtask_parent_id = task.id
        self._enter_mode(Mode.ADD_SUBTASK)
        return None

    def _start_edit(self) -> Result:
        task = self.current_task()
        if task is None:
            return None
        self.editing_task_id = task.id
        self._enter_mode(Mode.EDIT, task.title)
        return None

    def _start_search(self) -> Result:
        self.search_committed = self.filters.text
        self._enter_mode(Mode.SEARCH, self.filters.text)
        return None

    def _toggle_done(self) -> Result:
        targets = self.target_tasks()
        if not targets:
            self.set_status_message(self._t("STATUS_NO_TASK"))
            return None
        now = self.clock()
        after = []
        for task in targets:
            changed = task.snapshot()
            changed.set_status(task.toggled_status(), now)
            after.append(changed)
        action = update_action(targets, after, "toggle", kind=ActionKind.TOGGLE_STATUS)
        self.history.push(action)
        if len(after) == 1:
            key = "STATUS_TASK_DONE" if after[0].is_done else "STATUS_TASK_REOPENED"
            message = self._t(key)
        else:
            message = self._t("STATUS_TOGGLED_MANY", count=len(after))
        updates = [(task.id, task.status) for task in after]

        def work(store: TaskStore) -> None:
            for task_id, status in updates:
                store.set_status(task_id, status)

        return self.mutation_effect(work, action=action, message=message)

    def request_delete(self) -> Result:
        ids = self.get_target_ids()
        if not ids:
            self.set_status_message(self._t("STATUS_NO_TASK"))
            return None
        self._enter_mode(Mode.CONFIRM_DELETE)
        self.delete_ids = ids
        return None

    def _cycle_priority(self) -> Result:
        task = self.current_task()
        if task is None:
            return None
        new_priority = task.priority.next()
        changed = task.snapshot()
        changed.priority = new_priority
        action = update_action([task], [changed], "priority")
        self.history.push(action)
        store = self.store
        task_id = task.id

        def run() -> Message:
            try:
                store.set_priority(task_id, new_priority)
            except StoreError as exc:
                return PriorityChanged(task_id, new_priority, error=str(exc), action=action)
            return PriorityChanged(task_id, new_priority, action=action)

        return run

    def _toggle_expand(self) -> Result:
        task = self.current_task()
        if task is None or task.is_subtask:
            return None
        if not task.subtasks:
            self.set_status_message(self._t("STATUS_NO_SUBTASKS"))
            return None
        if task.id in self.expanded:
            self.expanded.discard(task.id)
        else:
            self.expanded.add(task.id)
        self.apply_filters(keep_task_id=task.id)
        return None

    def _expand_all(self) -> Result:
        parents = [task.id for task in self.all_tasks if task.subtasks]
        current = self.current_task()
        self.expanded.update(parents)
        self.apply_filters(keep_task_id=current.id if current else None)
        self.set_status_message(self._t("STATUS_EXPANDED_ALL", count=len(parents)))
        return None

    def _collapse_all(self) -> Result:
        count = len(self.expanded)
        current = self.current_task()
        keep = (current.parent_id or current.id) if current else None
        self.expanded.clear()
        self.apply_filters(keep_task_id=keep)
        self.set_status_message(self._t("STATUS_COLLAPSED_ALL", count=count))
        return None

    def _set_view_mode(self, mode: ViewMode) -> None:
        current = self.current_task()
        self.view_mode = mode
        self.apply_filters(keep_task_id=current.id if current else None)
        self.set_status_message(self._t("STATUS_VIEW_MODE", mode=self._t(f"VIEW_{mode.name}")))

    def _cycle_view_mode(self) -> Result:
        self._set_view_mode(self.view_mode.next())
        return None

    def _toggle_active_view(self) -> Result:
        self._set_view_mode(ViewMode.ALL if self.view_mode == ViewMode.ACTIVE else ViewMode.ACTIVE)
        return None

    def _toggle_wrap(self) -> Result:
        self.text_wrap = not self.text_wrap
        self.set_status_message(self._t("STATUS_WRAP_ON" if self.text_wrap else "STATUS_WRAP_OFF"))
        return None

    def _reload(self) -> Result:
        self.set_status_message(self._t("STATUS_RELOADING"))
        return self.reload_effect()

    # ---- undo / redo ----

    def undo(self) -> Result:
        action = self.history.pop_undo()
        if action is None:
            self.set_status_message(self._t("STATUS_NOTHING_TO_UNDO"))
            return None
        message = self._t("STATUS_UNDONE", what=action.kind.value)
        return self.mutation_effect(lambda store: apply_undo(store, action), action=action, message=message)

    def redo(self) -> Result:
        action = self.history.pop_redo()
        if action is None:
            self.set_status_message(self._t("STATUS_NOTHING_TO_REDO"))
            return None
        message = self._t("STATUS_REDONE", what=action.kind.value)
        return self.mutation_effect(lambda store: apply_redo(store, action), action=action, message=message)

    # ---- Add / AddSubtask ----

    def _handle_add_key(self, key: str) -> Result:
        if key == "escape":
            self._back_to_normal()
            return None
        if key == "enter":
            title = self.input_text.strip()
            parent_id = self.subtask_parent_id if self.mode == Mode.ADD_SUBTASK else None
            self._back_to_normal()
            if not title:
                return None
            return self.create_task(title, parent_id=parent_id)
        self._edit_input(key)
        return None

    def create_task(self, title: str, parent_id: Optional[str] = None) -> Result:
        """Create a task in the filtered project with the filtered tags, undo-aware."""
        task_id = uuid.uuid4().hex
        parent = self.find_task(parent_id) if parent_id else None
        if parent is not None:
            project_id = parent.project_id
            self.expanded.add(parent.id)
        else:
            project_id = self.filters.project_id or INBOX_PROJECT_ID
        tag_ids = list(self.filters.tag_ids)
        now = self.clock()
        snapshot = Task(
            id=task_id,
            title=title,
            project_id=project_id,
            parent_id=parent_id,
            created_at=now,
            updated_at=now,
            tags=[tag for tag in self.tags if tag.id in tag_ids],
        )
        action = create_action([snapshot], "create")
        self.history.push(action)
        store = self.store

        def run() -> Message:
            try:
                store.create_task(title, task_id=task_id, project_id=project_id, parent_id=parent_id, tag_ids=tag_ids)
            except StoreError as exc:
                return TaskCreated(task_id, error=str(exc), action=action)
            return TaskCreated(task_id, action=action)

        return run

    # ---- Edit ----

    def _handle_edit_key(self, key: str) -> Result:
        if key == "escape":
            self._back_to_normal()
            return None
        if key == "enter":
            task = self.find_task(self.editing_task_id or "")
            title = self.input_text.strip()
            self._back_to_normal()
            if task is None:
                return None
            if not title:
                self.set_status_message(self._t("STATUS_TITLE_EMPTY"))
                return None
            if title == task.title:
                return None
            changed = task.snapshot()
            changed.title = title
            action = update_action([task], [changed], "edit")
            self.history.push(action)
            task_id = task.id
            return self.mutation_effect(
                lambda store: store.update_title(task_id, title),
                action=action,
                message=self._t("STATUS_TASK_UPDATED"),
            )
        self._edit_input(key)
        return None

    # ---- Search ----

    def _handle_search_key(self, key: str) -> Result:
        if key == "escape":
            self.filters = self.filters.with_text(self.search_committed)
            self._back_to_normal()
            self.apply_filters()
            return None
        if key == "enter":
            self.search_committed = self.input_text.strip()
            self.filters = self.filters.with_text(self.search_committed)
            self._back_to_normal()
            self.apply_filters()
            return None
        if self._edit_input(key):
            # live filtering on every keystroke
            self.filters = self.filters.with_text(self.input_text)
            self.cursor = 0
            self.apply_filters()
        return None

    # ---- ConfirmDelete ----

    def _handle_confirm_delete_key(self, key: str) -> Result:
        if key in ("n", "N"):
            self._back_to_normal()
            self.set_status_message(self._t("STATUS_DELETE_CANCELLED"))
            return None
        if key not in ("y", "Y"):
            return None
        tasks = [task for task in (self.find_task(tid) for tid in self.delete_ids) if task is not None]
        doomed = {task.id for task in tasks}
        # subtasks go with their parent
        tasks = [task for task in tasks if not (task.parent_id and task.parent_id in doomed)]
        self._back_to_normal()
        if not tasks:
            return None
        gone = {task.id for task in tasks}
        gone.update(sub.id for task in tasks for sub in task.subtasks)
        links = [
            (other.id, dep.id) for other in self.all_tasks for dep in other.dependencies if dep.id in gone
        ]
        action = delete_action(tasks, "delete", links=links)
        self.history.push(action)
        ids = [task.id for task in tasks]
        self.selected.difference_update(ids)

        def work(store: TaskStore) -> None:
            for task_id in ids:
                store.delete_task(task_id)

        return self.mutation_effect(work, action=action, message=self._t("STATUS_DELETED", count=len(ids)))


__all__ = ["Mode", "ActiveTimer", "ListController", "TICK_INTERVAL"]
