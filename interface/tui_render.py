"""Rendering helpers for KlonchTUI to keep the class slim.

Every function takes the host (`tui`), which exposes the list controller as
`tui.controller` plus the DisplayMixin width helpers.
"""
from datetime import datetime
from typing import List, Optional, Tuple

from prompt_toolkit.formatted_text import FormattedText

from application.dates import format_due_date, format_elapsed
from application.task_filters import ViewMode
from core import Task
from interface.list_modes import Mode
from interface.selectors import Selector

Fragments = List[Tuple[str, str]]

HEADER_HEIGHT = 2
INPUT_HEIGHT = 1
STATUS_HEIGHT = 1
MAX_SUGGESTIONS = 6

VIEW_LABEL_KEYS = {
    ViewMode.ALL: "VIEW_ALL",
    ViewMode.ACTIVE: "VIEW_ACTIVE",
    ViewMode.RECENT: "VIEW_RECENT",
}


def _merge_style(selected_style: Optional[str], fragment_style: str) -> str:
    if not selected_style:
        return fragment_style
    return f"{selected_style} {fragment_style}".strip()


def _fragments_width(tui, fragments: Fragments) -> int:
    return sum(tui._display_width(text) for _, text in fragments)


def filter_summary(tui) -> str:
    """"Filters: Project: X | Tags: a, b | Text: t", empty when no filter is set."""
    ctl = tui.controller
    filters = ctl.filters
    if not filters.is_active():
        return ""
    parts: List[str] = []
    if filters.project_id:
        project = next((p for p in ctl.projects if p.id == filters.project_id), None)
        parts.append(tui._t("FILTER_PROJECT", name=project.name if project else filters.project_id))
    if filters.tag_ids:
        names = {tag.id: tag.name for tag in ctl.tags}
        tags = ", ".join(names.get(tid, tid) for tid in filters.tag_ids)
        parts.append(tui._t("FILTER_TAGS", tags=tags))
    if filters.text:
        parts.append(tui._t("FILTER_TEXT", text=filters.text))
    return tui._t("FILTER_PREFIX") + " | ".join(parts)


def body_height(tui) -> int:
    """Rows available to the task list once the fixed chrome is subtracted."""
    chrome = HEADER_HEIGHT + INPUT_HEIGHT + STATUS_HEIGHT + suggestion_height(tui)
    return max(1, tui.get_terminal_height() - chrome)


def suggestion_height(tui) -> int:
    ctl = tui.controller
    if ctl.mode != Mode.COMMAND or ctl.selector is not None:
        return 0
    return min(MAX_SUGGESTIONS, len(ctl.cmd_suggestions))


def build_header_text(tui) -> FormattedText:
    ctl = tui.controller
    width = max(1, tui.get_terminal_width())
    top_level = sum(1 for task in ctl.tasks if not task.is_subtask)
    result: Fragments = [
        ("class:header", " " + tui._t("HEADER_TITLE") + " "),
        ("class:border", "│ "),
        ("class:header.view", tui._t(VIEW_LABEL_KEYS[ctl.view_mode])),
        ("class:border", " │ "),
        ("class:text.dim", tui._t("HEADER_COUNTS", visible=top_level, total=len(ctl.all_tasks))),
    ]
    if ctl.selected:
        result.append(("class:border", " │ "))
        result.append(("class:mark", tui._t("HEADER_SELECTED", count=len(ctl.selected))))
    result.append(("class:border", " │ "))
    result.append(("class:text.dim", tui._t("HEADER_SORT", sort=ctl.sort_key.value)))
    if ctl.timer is not None:
        elapsed = format_elapsed(ctl.timer.elapsed_seconds(ctl.clock()))
        result.append(("class:border", " │ "))
        result.append(("class:header.timer", tui._t("TIMER_LABEL", elapsed=elapsed, title=ctl.timer.task_title)))
    used = _fragments_width(tui, result)
    if used > width:
        line = "".join(text for _, text in result)
        result = [("class:header", tui._trim_display(line, width))]
    result.append(("", "\n"))
    summary = filter_summary(tui)
    result.append(("class:header.filter", " " + tui._ellipsize(summary, width - 1) if summary else ""))
    return FormattedText(result)


def _due_fragment(task: Task, now: datetime) -> Tuple[str, str]:
    label = format_due_date(task.due_date, now)
    if task.is_overdue(now):
        return ("class:due.overdue", label)
    if task.is_due_today(now):
        return ("class:due.today", label)
    return ("class:due", label)


def _row_prefix(tui, task: Task, *, is_cursor: bool) -> Fragments:
    ctl = tui.controller
    cursor_mark = "›" if is_cursor else " "
    select_mark = "*" if task.id in ctl.selected else " "
    if task.is_subtask:
        indent = "    "
    elif task.has_subtasks:
        indent = "▾ " if task.id in ctl.expanded else "▸ "
    else:
        indent = "  "
    return [
        ("class:mark", cursor_mark + select_mark + " "),
        ("class:text.dim", indent),
        (f"class:{task.status.style}", task.status.icon + " "),
        (f"class:{task.priority.style}", task.priority.icon + " "),
    ]


def _row_suffix(tui, task: Task, now: datetime) -> Fragments:
    ctl = tui.controller
    suffix: Fragments = []
    if task.has_subtasks:
        done, total = task.subtask_progress()
        suffix.append(("class:text.dim", f" {done}/{total}"))
    if task.project is not None and not task.project.is_inbox and not task.is_subtask:
        suffix.append(("class:project", f" #{task.project.name}"))
    for tag in task.tags:
        suffix.append((f"class:tag {tag.color}".strip(), f" {tag.display_name}"))
    if task.due_date is not None:
        style, label = _due_fragment(task, now)
        suffix.append((style, f" {label}"))
    if ctl.blocked.get(task.id):
        suffix.append(("class:blocked", " ⊘ " + tui._t("LABEL_BLOCKED")))
    return suffix


def format_task_row(tui, task: Task, width: int, *, is_cursor: bool, now: datetime) -> List[Fragments]:
    """Render one task as one line, or several when text wrap is on."""
    prefix = _row_prefix(tui, task, is_cursor=is_cursor)
    suffix = _row_suffix(tui, task, now)
    prefix_width = _fragments_width(tui, prefix)
    suffix_width = _fragments_width(tui, suffix)
    title_style = "class:title.done" if task.is_done else "class:text"
    title_width = max(8, width - prefix_width - suffix_width)
    if tui.controller.text_wrap:
        title_lines = tui._wrap_display(task.title, title_width)
    else:
        title_lines = [tui._ellipsize(task.title, title_width)]

    selected_style = "class:selected" if is_cursor else None
    lines: List[Fragments] = []
    for idx, title in enumerate(title_lines):
        if idx == 0:
            line = list(prefix) + [(title_style, title)] + list(suffix)
        else:
            line = [("", " " * prefix_width), (title_style, title)]
        used = _fragments_width(tui, line)
        if used < width:
            line.append(("", " " * (width - used)))
        lines.append([(_merge_style(selected_style, style), text) for style, text in line])
    return lines


def render_task_list_text(tui) -> FormattedText:
    ctl = tui.controller
    if ctl.selector is not None:
        return render_selector_text(tui)
    width = max(1, tui.get_terminal_width())
    height = body_height(tui)
    ctl.set_viewport(height)
    if not ctl.tasks:
        if not ctl.loaded:
            key = "LOADING"
        elif ctl.filters.is_active() or ctl.view_mode != ViewMode.ALL:
            key = "EMPTY_FILTERED"
        else:
            key = "EMPTY_LIST"
        return FormattedText([("class:text.dim", "  " + tui._t(key))])

    now = ctl.clock()
    result: Fragments = []
    lines_used = 0
    end = min(len(ctl.tasks), ctl.scroll_offset + height)
    for idx in range(ctl.scroll_offset, end):
        for line in format_task_row(tui, ctl.tasks[idx], width, is_cursor=idx == ctl.cursor, now=now):
            if lines_used >= height:
                break
            if lines_used:
                result.append(("", "\n"))
            result.extend(line)
            lines_used += 1
        if lines_used >= height:
            break
    return FormattedText(result)


def render_selector_text(tui) -> FormattedText:
    ctl = tui.controller
    selector: Selector = ctl.selector
    width = max(1, tui.get_terminal_width())
    height = body_height(tui)
    result: Fragments = [("class:selector.title", " " + tui._ellipsize(selector.title, width - 1)), ("", "\n")]
    query_line = tui._t("SELECTOR_QUERY", query=selector.query) if selector.query else ""
    result.append(("class:text.dim", " " + query_line))
    visible = selector.visible_items()
    rows = max(1, height - 2)
    if not visible:
        result.append(("", "\n"))
        result.append(("class:text.dim", "   " + tui._t("SELECTOR_EMPTY")))
        return FormattedText(result)
    offset = max(0, selector.cursor - rows + 1)
    for idx in range(offset, min(len(visible), offset + rows)):
        item = visible[idx]
        is_current = idx == selector.cursor
        if item.sentinel:
            check = "   "
        elif selector.kind.toggles:
            check = "[x]" if selector.is_checked(item) else "[ ]"
        else:
            check = " ● " if selector.is_checked(item) else "   "
        base = "class:selector.current" if is_current else "class:selector.item"
        line: Fragments = [
            (base, ("›" if is_current else " ") + " "),
            (_merge_style(base, "class:selector.check"), check + " "),
        ]
        if item.color:
            line.append((_merge_style(base, item.color), "■ "))
        label_style = _merge_style(base, "class:text.dim") if item.sentinel else base
        line.append((label_style, tui._ellipsize(item.label, max(1, width - _fragments_width(tui, line)))))
        used = _fragments_width(tui, line)
        if is_current and used < width:
            line.append((base, " " * (width - used)))
        result.append(("", "\n"))
        result.extend(line)
    return FormattedText(result)


def _prompt_for(tui) -> str:
    ctl = tui.controller
    if ctl.mode == Mode.ADD:
        return tui._t("PROMPT_ADD")
    if ctl.mode == Mode.ADD_SUBTASK:
        parent = ctl.find_task(ctl.subtask_parent_id) if ctl.subtask_parent_id else None
        return tui._t("PROMPT_ADD_SUBTASK", title=parent.title if parent else "")
    if ctl.mode == Mode.EDIT:
        return tui._t("PROMPT_EDIT")
    if ctl.mode == Mode.SEARCH:
        return tui._t("PROMPT_SEARCH")
    if ctl.mode == Mode.COMMAND:
        return tui._t("PROMPT_COMMAND")
    return ""


def build_input_text(tui) -> FormattedText:
    ctl = tui.controller
    width = max(1, tui.get_terminal_width())
    if ctl.mode == Mode.CONFIRM_DELETE:
        return FormattedText([("class:confirm", " " + tui._t("CONFIRM_DELETE", count=len(ctl.delete_ids)))])
    if not ctl.mode.takes_text:
        if ctl.search_committed:
            return FormattedText([("class:text.dim", " " + tui._t("PROMPT_SEARCH") + ctl.search_committed)])
        return FormattedText([("", "")])
    prompt = _prompt_for(tui)
    room = max(1, width - tui._display_width(prompt) - 2)
    text = ctl.input_text
    # keep the tail visible while typing past the edge
    while tui._display_width(text) > room:
        text = text[1:]
    return FormattedText([
        ("class:input.prompt", " " + prompt),
        ("class:input", text),
        ("class:input", "▏"),
    ])


def build_suggestions_text(tui) -> FormattedText:
    ctl = tui.controller
    width = max(1, tui.get_terminal_width())
    result: Fragments = []
    suggestions = ctl.cmd_suggestions[:MAX_SUGGESTIONS]
    for idx, cmd in enumerate(suggestions):
        aliases = f" ({', '.join(cmd.aliases)})" if cmd.aliases else ""
        text = f"  {cmd.usage}{aliases}"
        text = tui._pad_display(text, max(1, min(width // 2, 44))) + cmd.description
        style = "class:suggestion.current" if idx == ctl.cmd_cursor else "class:suggestion"
        if idx:
            result.append(("", "\n"))
        result.append((style, tui._pad_display(text, width)))
    return FormattedText(result)


def build_status_text(tui) -> FormattedText:
    ctl = tui.controller
    width = max(1, tui.get_terminal_width())
    message = ctl.current_status_message()
    if message:
        return FormattedText([("class:message", " " + tui._ellipsize(message, width - 1))])
    if ctl.selector is not None:
        key = "FOOTER_SELECTOR"
    elif ctl.is_input_mode():
        key = "FOOTER_INPUT"
    else:
        key = "FOOTER_NORMAL"
    return FormattedText([("class:footer", " " + tui._ellipsize(tui._t(key), width - 1))])


__all__ = [
    "build_header_text",
    "build_input_text",
    "build_status_text",
    "build_suggestions_text",
    "body_height",
    "filter_summary",
    "format_task_row",
    "render_selector_text",
    "render_task_list_text",
    "suggestion_height",
]
