from typing import Dict

APP_NAME = "klonch"
APP_VERSION = "0.1.0"

LANG_PACK: Dict[str, Dict[str, str]] = {
    "en": {
        # labels
        "LABEL_NONE": "none",
        "LABEL_BLOCKED": "blocked",
        "LOADING": "Loading tasks...",
        "HEADER_TITLE": "klonch",
        "HEADER_COUNTS": "{visible}/{total} tasks",
        "HEADER_SELECTED": "{count} selected",
        "HEADER_SORT": "sort: {sort}",
        "VIEW_ALL": "All",
        "VIEW_ACTIVE": "Active",
        "VIEW_RECENT": "Recent",
        "FILTER_PREFIX": "Filters: ",
        "FILTER_PROJECT": "Project: {name}",
        "FILTER_TAGS": "Tags: {tags}",
        "FILTER_TEXT": "Text: {text}",
        "EMPTY_LIST": "No tasks. Press 'a' to add one.",
        "EMPTY_FILTERED": "No tasks match the current filters (esc clears them).",
        "TIMER_LABEL": "⏱ {elapsed} {title}",
        "PROMPT_ADD": "New task: ",
        "PROMPT_ADD_SUBTASK": "New subtask of {title}: ",
        "PROMPT_EDIT": "Edit: ",
        "PROMPT_SEARCH": "/",
        "PROMPT_COMMAND": ":",
        "CONFIRM_DELETE": "Delete {count} task(s)? (y/n)",
        "FOOTER_NORMAL": "a add · s subtask · enter edit · tab done · d delete · p priority · / search · : command · q quit",
        "FOOTER_INPUT": "enter confirm · esc cancel",
        "FOOTER_SELECTOR": "↑/↓ move · type to filter · enter choose · esc close",
        "SELECTOR_EMPTY": "No matches",
        "SELECTOR_QUERY": "Filter: {query}",
        # selectors
        "SELECTOR_PROJECT_ASSIGN": "Move {count} task(s) to project",
        "SELECTOR_TAG_TOGGLE": "Toggle tags on {count} task(s)",
        "SELECTOR_DEPENDENCIES": "Dependencies of {title}",
        "SELECTOR_PROJECT_FILTER": "Filter by project",
        "SELECTOR_TAG_FILTER": "Filter by tags",
        "SELECTOR_PARENT": "Parent of {title}",
        "SELECTOR_ALL_PROJECTS": "All projects",
        "SELECTOR_CLEAR_TAGS": "Clear tag filters",
        "SELECTOR_REMOVE_PARENT": "Remove parent",
        # status messages
        "STATUS_ERROR": "Error: {error}",
        "STATUS_LOAD_FAILED": "Failed to load tasks: {error}",
        "STATUS_RELOADING": "Reloading...",
        "STATUS_NO_TASK": "No task selected",
        "STATUS_TASK_CREATED": "Task created",
        "STATUS_TASK_UPDATED": "Task updated",
        "STATUS_TASK_DONE": "Task completed",
        "STATUS_TASK_REOPENED": "Task reopened",
        "STATUS_TOGGLED_MANY": "Toggled {count} tasks",
        "STATUS_TITLE_EMPTY": "Title cannot be empty",
        "STATUS_DELETED": "Deleted {count} task(s)",
        "STATUS_DELETE_CANCELLED": "Delete cancelled",
        "STATUS_PRIORITY_DEFERRED": "Priority: {priority} (move cursor to resort)",
        "STATUS_PRIORITY_SET": "Priority {priority} on {count} task(s)",
        "STATUS_INVALID_PRIORITY": "Invalid priority: {value} (low, medium, high, urgent)",
        "STATUS_DUE_SET": "Due {due} on {count} task(s)",
        "STATUS_INVALID_DATE": "Invalid date: {value}",
        "STATUS_SELECTED_ALL": "Selected {count} task(s)",
        "STATUS_SELECTION_CLEARED": "Selection cleared",
        "STATUS_FILTERS_CLEARED": "Filters cleared",
        "STATUS_FILTER_TEXT": "Filter: {text}",
        "STATUS_NO_SUBTASKS": "No subtasks to expand",
        "STATUS_EXPANDED_ALL": "Expanded {count} task(s)",
        "STATUS_COLLAPSED_ALL": "Collapsed {count} task(s)",
        "STATUS_SUBTASK_NESTING": "Subtasks cannot have subtasks",
        "STATUS_SUBTASK_NO_DEPENDENCIES": "Subtasks cannot have dependencies",
        "STATUS_NO_DEPENDENCY_CANDIDATES": "No other tasks to depend on",
        "STATUS_DEPENDENCY_ADDED": "Now depends on: {title}",
        "STATUS_DEPENDENCY_REMOVED": "No longer depends on: {title}",
        "STATUS_DEPENDENCY_CYCLE": "Dependency would create a cycle: {details}",
        "STATUS_DEPENDENCY_INVALID": "Invalid dependency: {details}",
        "STATUS_PARENT_HAS_SUBTASKS": "A task with subtasks cannot become a subtask",
        "STATUS_PARENT_HAS_DEPENDENCIES": "A task with dependencies cannot become a subtask",
        "STATUS_NO_PARENT_CANDIDATES": "No other top-level tasks",
        "STATUS_PARENT_SET": "Parent set: {title}",
        "STATUS_PARENT_REMOVED": "Parent removed",
        "STATUS_VIEW_MODE": "View: {mode}",
        "STATUS_WRAP_ON": "Text wrap on",
        "STATUS_WRAP_OFF": "Text wrap off",
        "STATUS_NOTHING_TO_UNDO": "Nothing to undo",
        "STATUS_NOTHING_TO_REDO": "Nothing to redo",
        "STATUS_UNDONE": "Undone: {what}",
        "STATUS_REDONE": "Redone: {what}",
        "STATUS_UNKNOWN_COMMAND": "Unknown command: {command}",
        "STATUS_USAGE": "Usage: {usage}",
        "STATUS_TAG_ADDED": "Tagged {count} task(s) with @{tag}",
        "STATUS_TAG_REMOVED": "Removed @{tag} from {count} task(s)",
        "STATUS_TAG_CREATED": "Created tag @{name}",
        "STATUS_TAG_EXISTS": "Tag already exists: @{name}",
        "STATUS_TAG_LIST": "Tags: {tags}",
        "STATUS_NO_TAGS": "No tags",
        "STATUS_NO_TAGS_HINT": "No tags yet. Create one with :newtag <name>",
        "STATUS_RECOLORED_TAGS": "Recolored {count} tag(s)",
        "STATUS_PROJECT_NOT_FOUND": "Project not found: {name} (create it with :newproject)",
        "STATUS_PROJECT_EXISTS": "Project already exists: {name}",
        "STATUS_PROJECT_CREATED": "Created project {name}",
        "STATUS_PROJECT_DELETED": "Deleted project {name}; its tasks moved to Inbox",
        "STATUS_PROJECT_ARCHIVED": "Archived project {name}",
        "STATUS_PROJECT_LIST": "Projects: {projects}",
        "STATUS_NO_PROJECTS": "No projects",
        "STATUS_INBOX_PROTECTED": "The Inbox project cannot be removed",
        "STATUS_RECOLORED_PROJECTS": "Recolored {count} project(s)",
        "STATUS_MOVED_TO_PROJECT": "Moved {count} task(s) to {project}",
        "STATUS_MARKED_DONE": "Marked {count} task(s) done",
        "STATUS_ARCHIVED": "Archived {count} task(s)",
        "STATUS_THEME_LIST": "Themes: {themes}",
        "STATUS_THEME_SET": "Theme: {name}",
        "STATUS_UNKNOWN_THEME": "Unknown theme: {name}",
        "STATUS_SORTED": "Sorted by {sort}",
        "STATUS_TIMER_STARTED": "Tracking time on {title}",
        "STATUS_TIMER_STOPPED": "Logged {duration} on {title}",
        "STATUS_TIMER_SWITCHED": "Logged {duration} on {previous}, now tracking {title}",
        "STATUS_TIMER_DROPPED": "Timer stopped: {title} was deleted",
        "STATUS_TIME_LOGGED": "Logged {duration} on {title}",
        "STATUS_NO_TIMER": "No timer running",
        "STATUS_INVALID_DURATION": "Invalid duration: {value} (e.g. 30m, 1h, 1h30m)",
        # cli
        "CLI_DESCRIPTION": "klonch: keyboard-driven personal task manager",
        "CLI_ADDED": "Added: {title}",
        "CLI_ADD_EMPTY": "Nothing to add: the task needs a title",
        "CLI_STORE_ERROR": "Storage error: {error}",
    },
    "ru": {
        "VIEW_ALL": "Все",
        "VIEW_ACTIVE": "Активные",
        "VIEW_RECENT": "Недавние",
        "FILTER_PREFIX": "Фильтры: ",
        "FILTER_PROJECT": "Проект: {name}",
        "FILTER_TAGS": "Теги: {tags}",
        "FILTER_TEXT": "Текст: {text}",
        "EMPTY_LIST": "Задач нет. Нажмите 'a', чтобы добавить.",
        "PROMPT_ADD": "Новая задача: ",
        "PROMPT_EDIT": "Правка: ",
        "CONFIRM_DELETE": "Удалить задач: {count}? (y/n)",
        "STATUS_NO_TASK": "Задача не выбрана",
        "STATUS_TASK_CREATED": "Задача создана",
        "STATUS_TASK_UPDATED": "Задача обновлена",
        "STATUS_TASK_DONE": "Задача выполнена",
        "STATUS_TASK_REOPENED": "Задача снова открыта",
        "STATUS_DELETED": "Удалено задач: {count}",
        "STATUS_NOTHING_TO_UNDO": "Нечего отменять",
        "STATUS_NOTHING_TO_REDO": "Нечего повторять",
        "STATUS_UNKNOWN_COMMAND": "Неизвестная команда: {command}",
        "STATUS_PRIORITY_DEFERRED": "Приоритет: {priority} (сдвиньте курсор для пересортировки)",
        "STATUS_ERROR": "Ошибка: {error}",
        "STATUS_LOAD_FAILED": "Не удалось загрузить задачи: {error}",
    },
}
