#!/usr/bin/env python3
"""
klonch: keyboard-driven personal task manager.

Entry point wiring the CLI parser to the TUI and the one-shot commands.
"""

import sys
from importlib.metadata import PackageNotFoundError, version as pkg_version
from typing import List, Optional

from application.ports import StoreError
from application.quick_add import quick_add
from application.task_filters import ViewMode
from config import get_db_path
from infrastructure.sqlite_store import SqliteTaskStore
from interface.cli_parser import build_parser as build_cli_parser
from interface.constants import APP_VERSION
from interface.i18n import translate
from interface.logging_setup import setup_logging
from interface.tui_app import KlonchTUI, cmd_tui
from interface.tui_themes import DEFAULT_THEME, THEMES


def _version() -> str:
    try:
        return pkg_version("klonch")
    except PackageNotFoundError:
        return APP_VERSION


def cmd_version(args) -> int:
    print(_version())
    return 0


def cmd_add(args) -> int:
    text = " ".join(args.words)
    db_path = getattr(args, "db", None) or get_db_path()
    try:
        store = SqliteTaskStore(str(db_path))
    except StoreError as exc:
        print(translate("CLI_STORE_ERROR", error=exc), file=sys.stderr)
        return 1
    try:
        task = quick_add(store, text)
    except ValueError:
        print(translate("CLI_ADD_EMPTY"), file=sys.stderr)
        return 2
    except StoreError as exc:
        print(translate("CLI_STORE_ERROR", error=exc), file=sys.stderr)
        return 1
    finally:
        store.close()
    print(translate("CLI_ADDED", title=task.title))
    return 0


def build_parser():
    return build_cli_parser(sys.modules[__name__], THEMES, [mode.value for mode in ViewMode])


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "version", False):
        return cmd_version(args)
    setup_logging()
    return args.func(args)


__all__ = ["main", "build_parser", "cmd_add", "cmd_tui", "cmd_version", "KlonchTUI", "THEMES", "DEFAULT_THEME"]


if __name__ == "__main__":
    sys.exit(main())
