"""Colon-command table, parsing and autocomplete."""

from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class CommandDef:
    name: str
    aliases: Tuple[str, ...] = ()
    has_args: bool = False
    usage: str = ""
    description: str = ""

    def matches_prefix(self, prefix: str) -> bool:
        return self.name.startswith(prefix) or any(alias.startswith(prefix) for alias in self.aliases)

    def matches_exactly(self, verb: str) -> bool:
        return verb == self.name or verb in self.aliases


COMMANDS: Tuple[CommandDef, ...] = (
    CommandDef("due", ("d",), True, "due <date|none>", "Set due date"),
    CommandDef("priority", ("pri", "p"), True, "priority <low|medium|high|urgent>", "Set priority"),
    CommandDef("tag", ("t",), True, "tag <name>", "Add tag"),
    CommandDef("project", ("proj", "mv", "move"), True, "project <name>", "Move to project"),
    CommandDef("parent", ("setparent",), False, "parent", "Set parent task"),
    CommandDef("newproject", ("np", "addproject"), True, "newproject <name>", "Create project"),
    CommandDef("deleteproject", ("dp", "rmproject"), True, "deleteproject <name>", "Delete project"),
    CommandDef("archiveproject", ("ap",), True, "archiveproject <name>", "Archive project"),
    CommandDef("recolor", (), False, "recolor", "Reassign project colors"),
    CommandDef("newtag", ("nt", "addtag"), True, "newtag <name>", "Create tag"),
    CommandDef("recolortags", (), False, "recolortags", "Reassign tag colors"),
    CommandDef("done", ("complete", "finish"), False, "done", "Mark done"),
    CommandDef("archive", ("arch",), False, "archive", "Archive"),
    CommandDef("delete", ("del", "rm"), False, "delete", "Delete"),
    CommandDef("theme", (), True, "theme <name>", "Switch theme"),
    CommandDef("sort", (), True, "sort <priority|due|title|status|created>", "Change sort order"),
    CommandDef("filter", ("f",), True, "filter <text>", "Filter by text"),
    CommandDef("filterproject", ("fp",), False, "filterproject", "Filter by project"),
    CommandDef("filtertag", ("ft",), False, "filtertag", "Filter by tags"),
    CommandDef("clear", (), False, "clear", "Clear filters"),
    CommandDef("projects", ("lsp",), False, "projects", "List projects"),
    CommandDef("tags", ("lst",), False, "tags", "List tags"),
    CommandDef("starttime", ("start", "track"), False, "starttime", "Start timer"),
    CommandDef("stoptime", ("stop",), False, "stoptime", "Stop timer"),
    CommandDef("addtime", ("logtime",), True, "addtime <30m|1h|1h30m>", "Log time"),
    CommandDef("help", ("h", "?"), False, "help", "Show commands"),
)


def split_command_line(line: str) -> Tuple[str, str]:
    """Split into (lowercased verb, whitespace-joined arguments)."""
    parts = (line or "").split()
    if not parts:
        return "", ""
    return parts[0].lower(), " ".join(parts[1:])


def resolve_command(verb: str) -> Optional[CommandDef]:
    verb = (verb or "").strip().lower()
    for cmd in COMMANDS:
        if cmd.matches_exactly(verb):
            return cmd
    return None


def suggest_commands(text: str) -> List[CommandDef]:
    """Prefix suggestions for the verb being typed.

    Only offered while the input has no space. Exact name/alias matches rank
    first, the rest keep table order.
    """
    if " " in (text or ""):
        return []
    prefix = (text or "").strip().lower()
    exact = [cmd for cmd in COMMANDS if prefix and cmd.matches_exactly(prefix)]
    rest = [cmd for cmd in COMMANDS if cmd not in exact and cmd.matches_prefix(prefix)]
    return exact + rest


def complete_command(text: str, cmd: CommandDef, for_tab: bool = False) -> str:
    """Input after choosing `cmd`.

    Without a space the whole input becomes the canonical name (plus a
    trailing space on tab completion when the command takes arguments).
    With a space only the verb is replaced and the arguments are kept.
    """
    text = text or ""
    if " " not in text:
        if for_tab and cmd.has_args:
            return cmd.name + " "
        return cmd.name
    _, _, args = text.partition(" ")
    return f"{cmd.name} {args}"


def help_text() -> str:
    return "  ".join(cmd.usage for cmd in COMMANDS)


__all__ = [
    "CommandDef",
    "COMMANDS",
    "split_command_line",
    "resolve_command",
    "suggest_commands",
    "complete_command",
    "help_text",
]
