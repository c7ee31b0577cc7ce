"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, TaskCounts)
- task_store.py: in-memory store, the only mutation surface
- task_view.py: filtering, display order, overdue predicate
- persistence.py: JSON round trip of the whole list through a key/value slot
"""
