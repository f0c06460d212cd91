"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus)
- task_codec.py: tasks file format (lenient reader, atomic writer)
- task_store.py: in-memory task list + persistence on every change
"""
