"""CLI parser construction for the klonch CLI/TUI."""

import argparse
from typing import Any, Mapping, Sequence


def build_parser(commands: Any, themes: Mapping[str, Any], views: Sequence[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="klonch",
        description="klonch: keyboard-driven personal task manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--db", help="path to the SQLite database (default: config db_path or ~/.local/share/klonch/klonch.db)")
    parser.add_argument("--version", action="store_true", help="print the version and exit")
    parser.set_defaults(func=commands.cmd_tui, theme=None, view=None)

    sub = parser.add_subparsers(dest="command", help="Commands")

    # tui
    tui_p = sub.add_parser("tui", help="Start the TUI (default)")
    tui_p.add_argument("--theme", choices=list(themes.keys()), help="color palette")
    tui_p.add_argument("--view", choices=list(views), help="initial view mode")
    tui_p.set_defaults(func=commands.cmd_tui)

    # add
    add_p = sub.add_parser(
        "add",
        help="Quick-add a task: #project @tag !priority due:<date>",
    )
    add_p.add_argument("words", nargs="+", help="task text with optional markers")
    add_p.set_defaults(func=commands.cmd_add)

    # version
    ver_p = sub.add_parser("version", help="Print the version")
    ver_p.set_defaults(func=commands.cmd_version)

    return parser
