"""
Task List App Module

Provides the ZenFocus task list:
- TaskStore: Ordered task list and slot persistence
- Reconciler: Keyed sync of the list container with the store
- EditSession: In-place text editing of one item
- TaskController: Intent routing and delegated item events
- TaskScreen: Pillow rendering of the list
- Flask Blueprint: REST API routes
"""

from .store import TaskStore
from .reconciler import Reconciler
from .edit_session import EditSession, EditState
from .controller import TaskController
from .screen import TaskScreen
from .routes import tasks_bp, init_routes

__all__ = [
    'TaskStore', 'Reconciler', 'EditSession', 'EditState',
    'TaskController', 'TaskScreen', 'tasks_bp', 'init_routes',
]
