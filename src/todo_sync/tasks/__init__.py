"""
Task subsystem.

Components:
- task_models.py: data structures (Task, FilterMode, StoreStatus, StoreSnapshot)
- filtering.py: pure visible-subset derivation
- task_store.py: in-memory collection kept consistent with the server
- task_view.py: callbacks + binding between a TaskStore and a display layer
"""
