# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_companion.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TODO_APP_NAME",
        "TODO_DATA_DIR",
        "TODO_STORE_PATH",
        "TODO_DESKTOP_NOTIFICATIONS",
        "TODO_REQUEST_PERMISSION_ON_LOAD",
        "TODO_DEFAULT_THEME",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.app_name == "todo"
    assert s.data_dir == Path(".local/todo")
    assert s.store_path == Path(".local/todo") / "store.json"
    assert s.desktop_notifications == "auto"
    assert s.request_permission_on_load is True
    assert s.default_theme == "light"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TODO_STORE_PATH", raising=False)
    monkeypatch.setenv("TODO_DESKTOP_NOTIFICATIONS", "OFF")
    monkeypatch.setenv("TODO_REQUEST_PERMISSION_ON_LOAD", "no")
    monkeypatch.setenv("TODO_DEFAULT_THEME", "neon")

    s = Settings.from_env()

    assert s.store_path == tmp_path / "store.json"
    assert s.desktop_notifications == "off"
    assert s.request_permission_on_load is False
    assert s.default_theme == "light"
