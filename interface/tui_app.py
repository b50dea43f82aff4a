"""prompt_toolkit host for the list controller.

The host owns the terminal and the event loop. It forwards normalized key
names to the controller, runs the effects the controller returns on a
single worker thread (one store operation at a time), and feeds their
messages back through `controller.update` on the loop.
"""

import asyncio
import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Dict, Iterable, Optional, Union

from prompt_toolkit.application import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import ConditionalContainer, HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style

from application.history import MAX_HISTORY_SIZE
from application.ports import TaskStore
from application.task_filters import ViewMode
from interface.i18n import translate
from interface.list_controller import ListController
from interface.messages import Effect, Message, Result, TimerEffect
from interface.tui_display import DisplayMixin
from interface.tui_render import (
    HEADER_HEIGHT,
    INPUT_HEIGHT,
    STATUS_HEIGHT,
    build_header_text,
    build_input_text,
    build_status_text,
    build_suggestions_text,
    render_task_list_text,
    suggestion_height,
)
from interface.tui_themes import DEFAULT_THEME, THEMES, build_style, get_theme_palette

logger = logging.getLogger("klonch.tui")

KEY_ALIASES = {
    "c-m": "enter",
    "c-j": "enter",
    "c-i": "tab",
    "c-h": "backspace",
    " ": "space",
}


def normalize_key(key: Union[Keys, str]) -> str:
    """Map a prompt_toolkit key to the names the controller understands."""
    name = key.value if isinstance(key, Keys) else str(key)
    return KEY_ALIASES.get(name, name)


def _iter_effects(result: Result) -> Iterable[Union[Effect, TimerEffect]]:
    if result is None:
        return []
    if isinstance(result, list):
        return result
    return [result]


class KlonchTUI(DisplayMixin):
    @staticmethod
    def get_theme_palette(theme: str) -> Dict[str, str]:
        return get_theme_palette(theme)

    @staticmethod
    def build_style(theme: str) -> Style:
        return build_style(theme)

    def __init__(
        self,
        store: TaskStore,
        *,
        theme: str = DEFAULT_THEME,
        view_mode: ViewMode = ViewMode.ALL,
        undo_limit: int = MAX_HISTORY_SIZE,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if theme not in THEMES:
            logger.warning("unknown theme %r, using %s", theme, DEFAULT_THEME)
            theme = DEFAULT_THEME
        self.store = store
        self.controller = ListController(
            store,
            view_mode=view_mode,
            undo_limit=undo_limit,
            theme=theme,
            clock=clock,
        )
        self.theme_name = theme
        self.style = self.build_style(theme)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="klonch-store")
        self._loop: Optional[asyncio.AbstractEventLoop] = None

        kb = KeyBindings()
        kb.timeout = 0
        not_typing = Condition(lambda: not self.controller.is_input_mode())

        @kb.add("q", eager=True, filter=not_typing)
        def _(event):
            event.app.exit()

        @kb.add("c-c", eager=True)
        def _(event):
            event.app.exit()

        @kb.add("escape", eager=True)
        def _(event):
            self.handle_key("escape")

        @kb.add(Keys.ScrollUp)
        def _(event):
            self.handle_key("up")

        @kb.add(Keys.ScrollDown)
        def _(event):
            self.handle_key("down")

        @kb.add(Keys.Any, eager=True)
        def _(event):
            key = normalize_key(event.key_sequence[0].key)
            if key.startswith("<"):
                # terminal responses and other pseudo keys
                return
            self.handle_key(key)

        self.header = Window(content=FormattedTextControl(self.get_header_text), height=HEADER_HEIGHT, always_hide_cursor=True)
        self.task_list = Window(content=FormattedTextControl(self.get_task_list_text), always_hide_cursor=True, wrap_lines=False)
        self.suggestions = ConditionalContainer(
            Window(
                content=FormattedTextControl(self.get_suggestions_text),
                height=lambda: max(1, suggestion_height(self)),
                always_hide_cursor=True,
            ),
            filter=Condition(lambda: suggestion_height(self) > 0),
        )
        self.input_line = Window(content=FormattedTextControl(self.get_input_text), height=INPUT_HEIGHT, always_hide_cursor=True)
        self.status_bar = Window(content=FormattedTextControl(self.get_status_text), height=STATUS_HEIGHT, always_hide_cursor=True)

        root = HSplit([self.header, self.task_list, self.suggestions, self.input_line, self.status_bar])

        self.app = Application(
            layout=Layout(root),
            key_bindings=kb,
            style=self.style,
            full_screen=True,
            mouse_support=True,
            refresh_interval=1.0,
        )
        # Make Esc responsive: prompt_toolkit defaults ttimeoutlen=0.5s to disambiguate
        # between a standalone Escape and ANSI key sequences (arrows, etc.).
        # Allow override for slow terminals/SSH sessions.
        try:
            self.app.ttimeoutlen = max(0.0, float(os.getenv("KLONCH_TUI_TTIMEOUTLEN", "0.05")))
        except ValueError:
            self.app.ttimeoutlen = 0.05

    @staticmethod
    def get_terminal_width() -> int:
        """Get current terminal width, default to 100 if unavailable."""
        try:
            return os.get_terminal_size().columns
        except (AttributeError, ValueError, OSError):
            return 100

    @staticmethod
    def get_terminal_height() -> int:
        try:
            return os.get_terminal_size().lines
        except (AttributeError, ValueError, OSError):
            return 40

    def _t(self, message_id: str, **kwargs) -> str:
        return translate(message_id, **kwargs)

    def force_render(self) -> None:
        app = getattr(self, "app", None)
        if app:
            app.invalidate()

    # ---- text providers ----

    def get_header_text(self) -> FormattedText:
        return build_header_text(self)

    def get_task_list_text(self) -> FormattedText:
        return render_task_list_text(self)

    def get_suggestions_text(self) -> FormattedText:
        return build_suggestions_text(self)

    def get_input_text(self) -> FormattedText:
        return build_input_text(self)

    def get_status_text(self) -> FormattedText:
        return build_status_text(self)

    # ---- keys and effects ----

    def handle_key(self, key: str) -> None:
        self.dispatch(self.controller.handle_key(key))

    def dispatch(self, result: Result) -> None:
        """Run effects off the loop and schedule timer messages."""
        for effect in _iter_effects(result):
            if isinstance(effect, TimerEffect):
                self._schedule(effect)
            else:
                future = self._executor.submit(effect)
                future.add_done_callback(self._effect_done)
        self._sync_theme()
        self.force_render()

    def _schedule(self, effect: TimerEffect) -> None:
        if self._loop is None:
            logger.debug("timer effect dropped before the loop started")
            return
        self._loop.call_later(effect.delay, self.deliver, effect.message)

    def _effect_done(self, future: Future) -> None:
        try:
            msg = future.result()
        except Exception as exc:
            logger.exception("effect failed")
            self._post(self._report_failure, exc)
            return
        if msg is not None:
            self._post(self.deliver, msg)
        else:
            self._post(self.force_render)

    def _post(self, callback, *args) -> None:
        if self._loop is None:
            callback(*args)
            return
        self._loop.call_soon_threadsafe(callback, *args)

    def _report_failure(self, exc: Exception) -> None:
        self.controller.set_status_message(self._t("STATUS_ERROR", error=exc), ttl=6)
        self.dispatch(self.controller.reload_effect())

    def deliver(self, msg: Message) -> None:
        self.dispatch(self.controller.update(msg))

    def _sync_theme(self) -> None:
        name = self.controller.theme_name
        if name == self.theme_name:
            return
        self.theme_name = name
        self.style = self.build_style(name)
        self.app.style = self.style

    def _on_start(self) -> None:
        self._loop = asyncio.get_running_loop()
        self.dispatch(self.controller.start())

    def run(self) -> None:
        try:
            self.app.run(pre_run=self._on_start)
        finally:
            self._executor.shutdown(wait=True)


def cmd_tui(args) -> int:
    from config import get_db_path, get_default_view, get_undo_limit, get_user_theme
    from infrastructure.sqlite_store import SqliteTaskStore

    db_path = getattr(args, "db", None) or get_db_path()
    theme = getattr(args, "theme", None) or get_user_theme() or DEFAULT_THEME
    view = getattr(args, "view", None) or get_default_view()
    store = SqliteTaskStore(str(db_path))
    try:
        tui = KlonchTUI(
            store,
            theme=theme,
            view_mode=ViewMode.from_string(view),
            undo_limit=get_undo_limit(),
        )
        tui.run()
    finally:
        store.close()
    return 0
