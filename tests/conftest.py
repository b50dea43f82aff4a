import logging
from datetime import datetime

import pytest

import config
from infrastructure.sqlite_store import SqliteTaskStore
from interface.list_controller import ListController
from interface.messages import TimerEffect

# Wednesday
NOW = datetime(2024, 3, 13, 10, 0, 0)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep config, database and language lookups away from the real home directory."""
    monkeypatch.setenv("KLONCH_CONFIG", str(tmp_path / "klonch_config.yaml"))
    monkeypatch.setenv("KLONCH_DB", str(tmp_path / "klonch.db"))
    monkeypatch.delenv("KLONCH_LANG", raising=False)
    monkeypatch.delenv("KLONCH_DEBUG", raising=False)
    monkeypatch.setattr(config, "DEFAULT_DATA_DIR", tmp_path / "data")
    app_logger = logging.getLogger("klonch")
    saved = (list(app_logger.handlers), app_logger.propagate, app_logger.level)
    yield tmp_path / "klonch_config.yaml"
    for handler in app_logger.handlers:
        if handler not in saved[0]:
            handler.close()
    app_logger.handlers[:] = saved[0]
    app_logger.propagate = saved[1]
    app_logger.setLevel(saved[2])


@pytest.fixture
def store():
    db = SqliteTaskStore()
    yield db
    db.close()


def _flatten(result):
    if result is None:
        return []
    if isinstance(result, list):
        return list(result)
    return [result]


@pytest.fixture
def run_effects():
    """Synchronous stand-in for the host: run effects in order, feed messages back.

    Timer effects are recorded but never fired.
    """

    def _run(controller, result, limit=100):
        pending = _flatten(result)
        timers = []
        steps = 0
        while pending:
            effect = pending.pop(0)
            if isinstance(effect, TimerEffect):
                timers.append(effect)
                continue
            msg = effect()
            if msg is not None:
                pending.extend(_flatten(controller.update(msg)))
            steps += 1
            assert steps < limit, "effect loop did not settle"
        return timers

    return _run


@pytest.fixture
def press(run_effects):
    def _press(controller, *keys):
        timers = []
        for key in keys:
            timers.extend(run_effects(controller, controller.handle_key(key)))
        return timers

    return _press


@pytest.fixture
def type_text(press):
    def _type(controller, text):
        return press(controller, *["space" if ch == " " else ch for ch in text])

    return _type


@pytest.fixture
def make_controller(store, run_effects):
    def _make(**kwargs):
        kwargs.setdefault("clock", lambda: NOW)
        controller = ListController(store, **kwargs)
        run_effects(controller, controller.start())
        return controller

    return _make