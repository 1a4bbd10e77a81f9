# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep machine-specific values in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory for the store and todo.log (default: .local/todo).",
    "TODO_STORE_PATH": "JSON blob store path (default: <data_dir>/store.json).",
    # Notifications
    "TODO_DESKTOP_NOTIFICATIONS": (
        "auto | on | off. 'auto' probes notify-send on first use; 'off' always uses console messages."
    ),
    "TODO_REQUEST_PERMISSION_ON_LOAD": "Ask for notification permission at startup (true/false).",
    "TODO_NOTIFICATION_TITLE": "Title of desktop notifications (default: To-Do Reminder).",
    # Presentation
    "TODO_DEFAULT_THEME": "light | dark; used until a theme is saved with /theme.",
}
