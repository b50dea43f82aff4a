"""Command mode mixin: colon-command line editing, autocomplete and verbs."""

from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional, Set

from application.commands import (
    CommandDef,
    complete_command,
    help_text,
    resolve_command,
    split_command_line,
    suggest_commands,
)
from application.dates import parse_duration, parse_natural_date
from application.history import update_action
from application.ports import StoreError, TaskStore
from application.task_filters import SortKey, TaskFilters
from core import Project, Status, Tag, Task, normalize_tag_name, parse_priority, project_color, tag_color
from interface.list_modes import Mode
from interface.messages import Message, Result, TimeLogged, TimerStarted, TimerStopped
from interface.tui_themes import THEMES

if TYPE_CHECKING:
    from application.history import UndoHistory
    from interface.list_controller import ActiveTimer

NO_DATE_WORDS = ("none", "clear", "-")


def _persist_theme(name: str) -> None:
    from config import set_user_theme

    set_user_theme(name)


class CommandMixin:
    """Mixin providing the Command mode and the colon verbs."""

    mode: Mode
    input_text: str
    cmd_suggestions: List[CommandDef]
    cmd_cursor: int
    store: TaskStore
    tasks: List[Task]
    all_tasks: List[Task]
    selected: Set[str]
    clock: Callable[[], datetime]
    projects: List[Project]
    tags: List[Tag]
    filters: TaskFilters
    search_committed: str
    sort_key: SortKey
    theme_name: str
    history: "UndoHistory"
    timer: Optional["ActiveTimer"]

    # ---- mode handling ----

    def _start_command(self) -> Result:
        self._enter_mode(Mode.COMMAND)
        self._refresh_suggestions()
        return None

    def _refresh_suggestions(self) -> None:
        # the list is frozen once a space is typed so Enter can still swap the verb
        if " " not in self.input_text:
            self.cmd_suggestions = suggest_commands(self.input_text)
            self.cmd_cursor = 0

    def _selected_suggestion(self) -> Optional[CommandDef]:
        if not self.cmd_suggestions:
            return None
        return self.cmd_suggestions[min(self.cmd_cursor, len(self.cmd_suggestions) - 1)]

    def _handle_command_key(self, key: str) -> Result:
        if key == "escape":
            self._back_to_normal()
            return None
        if key == "enter":
            line = self.input_text.strip()
            suggestion = self._selected_suggestion()
            self._back_to_normal()
            if not line:
                return None
            if suggestion is not None:
                line = complete_command(line, suggestion)
            return self.execute_command(line)
        if key == "tab":
            suggestion = self._selected_suggestion()
            if suggestion is not None:
                self.input_text = complete_command(self.input_text, suggestion, for_tab=True)
                self._refresh_suggestions()
            return None
        if key in ("up", "c-p"):
            if self.cmd_suggestions:
                self.cmd_cursor = (self.cmd_cursor - 1) % len(self.cmd_suggestions)
            return None
        if key in ("down", "c-n"):
            if self.cmd_suggestions:
                self.cmd_cursor = (self.cmd_cursor + 1) % len(self.cmd_suggestions)
            return None
        if self._edit_input(key):
            self._refresh_suggestions()
        return None

    def execute_command(self, line: str) -> Result:
        """Run one colon-command line; user errors end up in the status line."""
        verb, args = split_command_line(line)
        if not verb:
            return None
        cmd = resolve_command(verb)
        if cmd is None:
            self.set_status_message(self._t("STATUS_UNKNOWN_COMMAND", command=verb))
            return None
        if cmd.has_args and not args and cmd.name not in ("theme", "filter"):
            self.set_status_message(self._t("STATUS_USAGE", usage=cmd.usage))
            return None
        handler: Callable[[str], Result] = getattr(self, f"_cmd_{cmd.name}")
        return handler(args)

    def _require_targets(self) -> List[Task]:
        targets = self.target_tasks()
        if not targets:
            self.set_status_message(self._t("STATUS_NO_TASK"))
        return targets

    def _bulk_update(
        self,
        targets: List[Task],
        change: Callable[[Task], None],
        work: Callable[[TaskStore, Task], None],
        message: str,
        description: str,
    ) -> Result:
        """Undo-aware field update applied to every target."""
        after = []
        for task in targets:
            changed = task.snapshot()
            change(changed)
            after.append(changed)
        action = update_action(targets, after, description)
        self.history.push(action)

        def run(store: TaskStore) -> None:
            for task in after:
                work(store, task)

        return self.mutation_effect(run, action=action, message=message)

    def _find_project(self, name: str) -> Optional[Project]:
        needle = name.strip().lower()
        for project in self.projects:
            if project.name.lower() == needle:
                return project
        return None

    # ---- task verbs ----

    def _cmd_due(self, args: str) -> Result:
        if args.strip().lower() in NO_DATE_WORDS:
            due = None
        else:
            due = parse_natural_date(args, self.clock())
            if due is None:
                self.set_status_message(self._t("STATUS_INVALID_DATE", value=args))
                return None
        targets = self._require_targets()
        if not targets:
            return None

        def change(task: Task) -> None:
            task.due_date = due

        label = due.strftime("%Y-%m-%d") if due else self._t("LABEL_NONE")
        return self._bulk_update(
            targets,
            change,
            lambda store, task: store.set_due_date(task.id, task.due_date),
            self._t("STATUS_DUE_SET", due=label, count=len(targets)),
            "due",
        )

    def _cmd_priority(self, args: str) -> Result:
        priority = parse_priority(args)
        if priority is None:
            self.set_status_message(self._t("STATUS_INVALID_PRIORITY", value=args))
            return None
        targets = self._require_targets()
        if not targets:
            return None

        def change(task: Task) -> None:
            task.priority = priority

        return self._bulk_update(
            targets,
            change,
            lambda store, task: store.set_priority(task.id, task.priority),
            self._t("STATUS_PRIORITY_SET", priority=priority.code, count=len(targets)),
            "priority",
        )

    def _cmd_tag(self, args: str) -> Result:
        name = normalize_tag_name(args)
        if not name:
            self.set_status_message(self._t("STATUS_USAGE", usage="tag <name>"))
            return None
        targets = self._require_targets()
        if not targets:
            return None
        ids = [task.id for task in targets]
        color = tag_color(len(self.tags))

        def work(store: TaskStore) -> None:
            tag = store.get_or_create_tag(name, color)
            for task_id in ids:
                store.add_tag_to_task(task_id, tag.id)

        return self.mutation_effect(work, message=self._t("STATUS_TAG_ADDED", tag=name, count=len(ids)))

    def _cmd_project(self, args: str) -> Result:
        project = self._find_project(args)
        if project is None:
            self.set_status_message(self._t("STATUS_PROJECT_NOT_FOUND", name=args))
            return None
        targets = self._require_targets()
        if not targets:
            return None
        return self._move_to_project(targets, project)

    def _move_to_project(self, targets: List[Task], project: Project) -> Result:
        def change(task: Task) -> None:
            task.project_id = project.id
            task.project = project

        return self._bulk_update(
            targets,
            change,
            lambda store, task: store.set_project(task.id, project.id),
            self._t("STATUS_MOVED_TO_PROJECT", project=project.name, count=len(targets)),
            "project",
        )

    def _cmd_parent(self, args: str) -> Result:
        return self.open_parent_selector()

    def _cmd_done(self, args: str) -> Result:
        targets = [task for task in self._require_targets() if not task.is_done]
        if not targets:
            return None
        now = self.clock()
        return self._bulk_update(
            targets,
            lambda task: task.set_status(Status.DONE, now),
            lambda store, task: store.set_status(task.id, Status.DONE),
            self._t("STATUS_MARKED_DONE", count=len(targets)),
            "done",
        )

    def _cmd_archive(self, args: str) -> Result:
        targets = self._require_targets()
        if not targets:
            return None
        now = self.clock()
        self.selected.difference_update(task.id for task in targets)
        return self._bulk_update(
            targets,
            lambda task: task.set_status(Status.ARCHIVED, now),
            lambda store, task: store.set_status(task.id, Status.ARCHIVED),
            self._t("STATUS_ARCHIVED", count=len(targets)),
            "archive",
        )

    def _cmd_delete(self, args: str) -> Result:
        return self.request_delete()

    # ---- projects and tags ----

    def _cmd_newproject(self, args: str) -> Result:
        name = args.strip()
        if self._find_project(name) is not None:
            self.set_status_message(self._t("STATUS_PROJECT_EXISTS", name=name))
            return None
        color = project_color(len(self.projects))
        return self.mutation_effect(
            lambda store: store.create_project(name, color),
            message=self._t("STATUS_PROJECT_CREATED", name=name),
        )

    def _cmd_deleteproject(self, args: str) -> Result:
        project = self._find_project(args)
        if project is None:
            self.set_status_message(self._t("STATUS_PROJECT_NOT_FOUND", name=args))
            return None
        if project.is_inbox:
            self.set_status_message(self._t("STATUS_INBOX_PROTECTED"))
            return None
        if self.filters.project_id == project.id:
            self.filters = self.filters.with_project(None)
        return self.mutation_effect(
            lambda store: store.delete_project(project.id),
            message=self._t("STATUS_PROJECT_DELETED", name=project.name),
        )

    def _cmd_archiveproject(self, args: str) -> Result:
        project = self._find_project(args)
        if project is None:
            self.set_status_message(self._t("STATUS_PROJECT_NOT_FOUND", name=args))
            return None
        if project.is_inbox:
            self.set_status_message(self._t("STATUS_INBOX_PROTECTED"))
            return None
        if self.filters.project_id == project.id:
            self.filters = self.filters.with_project(None)
        return self.mutation_effect(
            lambda store: store.archive_project(project.id),
            message=self._t("STATUS_PROJECT_ARCHIVED", name=project.name),
        )

    def _cmd_recolor(self, args: str) -> Result:
        if not self.projects:
            self.set_status_message(self._t("STATUS_NO_PROJECTS"))
            return None
        ids = [project.id for project in self.projects]

        def work(store: TaskStore) -> None:
            for idx, project_id in enumerate(ids):
                store.update_project_color(project_id, project_color(idx))

        return self.mutation_effect(work, message=self._t("STATUS_RECOLORED_PROJECTS", count=len(ids)))

    def _cmd_newtag(self, args: str) -> Result:
        name = normalize_tag_name(args)
        if not name:
            self.set_status_message(self._t("STATUS_USAGE", usage="newtag <name>"))
            return None
        if any(tag.name.lower() == name.lower() for tag in self.tags):
            self.set_status_message(self._t("STATUS_TAG_EXISTS", name=name))
            return None
        color = tag_color(len(self.tags))
        return self.mutation_effect(
            lambda store: store.create_tag(name, color),
            message=self._t("STATUS_TAG_CREATED", name=name),
        )

    def _cmd_recolortags(self, args: str) -> Result:
        if not self.tags:
            self.set_status_message(self._t("STATUS_NO_TAGS"))
            return None
        ids = [tag.id for tag in self.tags]

        def work(store: TaskStore) -> None:
            for idx, tag_id in enumerate(ids):
                store.update_tag_color(tag_id, tag_color(idx))

        return self.mutation_effect(work, message=self._t("STATUS_RECOLORED_TAGS", count=len(ids)))

    def _cmd_projects(self, args: str) -> Result:
        if not self.projects:
            self.set_status_message(self._t("STATUS_NO_PROJECTS"))
            return None
        counts = {}
        for task in self.all_tasks:
            counts[task.project_id] = counts.get(task.project_id, 0) + 1
        listing = ", ".join(f"{p.name} ({counts.get(p.id, 0)})" for p in self.projects)
        self.set_status_message(self._t("STATUS_PROJECT_LIST", projects=listing), ttl=8)
        return None

    def _cmd_tags(self, args: str) -> Result:
        if not self.tags:
            self.set_status_message(self._t("STATUS_NO_TAGS"))
            return None
        listing = ", ".join(tag.display_name for tag in self.tags)
        self.set_status_message(self._t("STATUS_TAG_LIST", tags=listing), ttl=8)
        return None

    # ---- view ----

    def _cmd_theme(self, args: str) -> Result:
        name = args.strip().lower()
        if not name:
            self.set_status_message(self._t("STATUS_THEME_LIST", themes=", ".join(THEMES)))
            return None
        if name not in THEMES:
            self.set_status_message(self._t("STATUS_UNKNOWN_THEME", name=name))
            return None
        self.theme_name = name
        self.set_status_message(self._t("STATUS_THEME_SET", name=name))

        def run() -> Optional[Message]:
            _persist_theme(name)
            return None

        return run

    def _cmd_sort(self, args: str) -> Result:
        key = SortKey.from_string(args)
        if key is None:
            self.set_status_message(self._t("STATUS_USAGE", usage="sort <priority|due|title|status|created>"))
            return None
        current = self.current_task()
        self.sort_key = key
        self.apply_filters(keep_task_id=current.id if current else None)
        self.set_status_message(self._t("STATUS_SORTED", sort=key.value))
        return None

    def _cmd_filter(self, args: str) -> Result:
        text = args.strip()
        self.search_committed = text
        self.filters = self.filters.with_text(text)
        self.cursor = 0
        self.apply_filters()
        if text:
            self.set_status_message(self._t("STATUS_FILTER_TEXT", text=text))
        return None

    def _cmd_filterproject(self, args: str) -> Result:
        return self.open_project_filter()

    def _cmd_filtertag(self, args: str) -> Result:
        return self.open_tag_filter()

    def _cmd_clear(self, args: str) -> Result:
        self.clear_filters()
        return None

    def _cmd_help(self, args: str) -> Result:
        self.set_status_message(help_text(), ttl=12)
        return None

    # ---- time tracking ----

    def _cmd_starttime(self, args: str) -> Result:
        targets = self._require_targets()
        if not targets:
            return None
        task = targets[0]
        running = self.timer.entry_id if self.timer else None
        running_title = self.timer.task_title if self.timer else ""
        store = self.store

        def run() -> Message:
            stopped = None
            try:
                if running:
                    stopped = store.stop_time_entry(running).duration
                entry = store.start_time_entry(task.id)
            except StoreError as exc:
                return TimerStarted(error=str(exc))
            return TimerStarted(
                entry=entry,
                task_title=task.title,
                stopped_minutes=stopped,
                stopped_title=running_title,
            )

        return run

    def _cmd_stoptime(self, args: str) -> Result:
        if self.timer is None:
            self.set_status_message(self._t("STATUS_NO_TIMER"))
            return None
        entry_id = self.timer.entry_id
        title = self.timer.task_title
        store = self.store

        def run() -> Message:
            try:
                entry = store.stop_time_entry(entry_id)
            except StoreError as exc:
                return TimerStopped(error=str(exc))
            return TimerStopped(minutes=entry.duration, task_title=title)

        return run

    def _cmd_addtime(self, args: str) -> Result:
        minutes = parse_duration(args)
        if minutes is None:
            self.set_status_message(self._t("STATUS_INVALID_DURATION", value=args))
            return None
        targets = self._require_targets()
        if not targets:
            return None
        task = targets[0]
        store = self.store

        def run() -> Message:
            try:
                store.add_time_entry(task.id, minutes)
            except StoreError as exc:
                return TimeLogged(error=str(exc))
            return TimeLogged(minutes=minutes, task_title=task.title)

        return run


__all__ = ["CommandMixin"]
