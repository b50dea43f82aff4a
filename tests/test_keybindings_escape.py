from prompt_toolkit.keys import Keys

from infrastructure.sqlite_store import SqliteTaskStore
from interface.list_modes import Mode
from interface.tui_app import KlonchTUI, normalize_key


def _tui():
    return KlonchTUI(SqliteTaskStore())


def test_escape_binding_is_eager():
    tui = _tui()
    bindings = tui.app.key_bindings.bindings
    esc_bindings = [
        b for b in bindings
        if any((getattr(k, "key", k) == "escape") or (getattr(k, "key", None) == Keys.Escape) or k == Keys.Escape for k in b.keys)
    ]
    assert esc_bindings, "Escape binding not found"
    assert all(b.eager() if callable(b.eager) else bool(b.eager) for b in esc_bindings)


def test_escape_does_not_wait_for_sequences():
    tui = _tui()
    assert tui.app.key_bindings.timeout == 0


def test_ttimeoutlen_env_override(monkeypatch):
    monkeypatch.setenv("KLONCH_TUI_TTIMEOUTLEN", "0.2")
    assert _tui().app.ttimeoutlen == 0.2
    monkeypatch.setenv("KLONCH_TUI_TTIMEOUTLEN", "soon")
    assert _tui().app.ttimeoutlen == 0.05


def test_normalize_key_aliases():
    assert normalize_key(Keys.ControlM) == "enter"
    assert normalize_key(Keys.ControlI) == "tab"
    assert normalize_key(Keys.Up) == "up"
    assert normalize_key(" ") == "space"
    assert normalize_key("G") == "G"


def test_escape_leaves_text_mode_without_effects():
    tui = _tui()
    tui.handle_key("a")
    assert tui.controller.mode == Mode.ADD
    tui.handle_key("escape")
    assert tui.controller.mode == Mode.NORMAL


def test_unknown_theme_falls_back():
    tui = KlonchTUI(SqliteTaskStore(), theme="neon")
    assert tui.theme_name == "nord"
    assert tui.controller.theme_name == "nord"
