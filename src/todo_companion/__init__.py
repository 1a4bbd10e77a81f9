"""Local task list with recurring reminders."""

__version__ = "0.1.0"
