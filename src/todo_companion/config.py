# src/todo_companion/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time: every value has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

_NOTIFICATION_MODES = ("auto", "on", "off")
_THEMES = ("light", "dark")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_path: Path

    # ---- Notifications ----
    desktop_notifications: str  # auto | on | off
    request_permission_on_load: bool
    notification_title: str

    # ---- Presentation ----
    default_theme: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo") or "todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        store_path = _env_path(_k("STORE_PATH"), data_dir / "store.json")

        desktop_notifications = _env_choice(_k("DESKTOP_NOTIFICATIONS"), _NOTIFICATION_MODES, "auto")
        request_permission_on_load = _env_bool(_k("REQUEST_PERMISSION_ON_LOAD"), True)
        notification_title = _env(_k("NOTIFICATION_TITLE"), "To-Do Reminder")

        default_theme = _env_choice(_k("DEFAULT_THEME"), _THEMES, "light")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_path=store_path,
            desktop_notifications=desktop_notifications,
            request_permission_on_load=request_permission_on_load,
            notification_title=notification_title,
            default_theme=default_theme,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Local .env never overrides variables already exported by the shell.
    load_dotenv(override=False)
    return Settings.from_env()
