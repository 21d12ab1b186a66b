"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStats, TaskFilter) and timestamp helpers
- task_store.py: JSON-file store, write-through on every mutation
- task_filters.py: search/completion filters and display order for the client view
"""
