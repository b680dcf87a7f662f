"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskPriority) and the record codec
- task_repository.py: load/save the task list as one JSON blob
- id_allocator.py: monotonic notification ids
- task_scheduler.py: maps tasks to platform reminders (schedule / cancel)
- task_store.py: the ordered task list and every mutation on it
"""
