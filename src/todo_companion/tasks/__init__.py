"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Reminder, Priority, RepeatRule)
- task_store.py: ordered in-memory list persisted to a key-value blob
- recurrence.py: next-occurrence arithmetic for repeat rules
- task_scheduler.py: per-task one-shot reminder timers on the event loop
- task_api.py: reminder form helpers and read-only queries for front ends
"""
