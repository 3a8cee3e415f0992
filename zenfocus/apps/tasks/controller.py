"""
Task Controller

Routes user intents to the TaskStore and runs a reconciliation pass after each one.
Item events are handled by one set of listeners on the list container.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from zenfocus.ui.view import Role, ViewEvent, ViewNode
from zenfocus.apps.tasks.edit_session import EditSession
from zenfocus.apps.tasks.reconciler import Reconciler
from zenfocus.apps.tasks.store import TaskStore


class TaskController:
    """Binds add/toggle/remove/edit intents to the store and the view"""

    def __init__(self, store: TaskStore, reconciler: Reconciler,
                 input_field: Optional[ViewNode] = None,
                 add_button: Optional[ViewNode] = None,
                 notify: Optional[Callable[[str, str], None]] = None):
        """
        Initialize TaskController

        Args:
            store: Task store
            reconciler: Reconciler owning the list container
            input_field: New-task input node (optional)
            add_button: Add button node (optional)
            notify: Fire-and-forget notify(message, kind) callback
        """
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.reconciler = reconciler
        self.container = reconciler.container
        self.input_field = input_field
        self.add_button = add_button
        self.notify = notify
        self.sessions: Dict[int, EditSession] = {}

        # One mutation pipeline at a time (web remote runs on its own thread)
        self.lock = threading.RLock()

        if notify:
            if store.on_corruption is None:
                store.on_corruption = lambda message: notify(message, 'error')
            if store.on_write_failure is None:
                store.on_write_failure = lambda message: notify(message, 'warning')

        self._bind_events()

    def _bind_events(self):
        self.container.add_listener('click', self._on_click)
        self.container.add_listener('dblclick', self._on_double_click)
        self.container.add_listener('keydown', self._on_keydown)

        if self.input_field is not None:
            self.input_field.add_listener('keydown', self._on_input_key)
        if self.add_button is not None:
            self.add_button.add_listener('click', lambda event: self.add_from_input())

        self.logger.debug("Task list events bound")

    def start(self):
        """Load persisted tasks and draw the initial list"""
        with self.lock:
            self.store.load()
            self.render()
        self.logger.info(f"Task list ready with {len(self.store)} tasks")

    def render(self) -> Dict[str, int]:
        """Run one reconciliation pass against the store"""
        with self.lock:
            return self.reconciler.reconcile(self.store.tasks)

    # Intents

    def add(self, text: str) -> Optional[Dict[str, Any]]:
        with self.lock:
            task = self.store.add(text)
            self.render()
            return task

    def add_from_input(self) -> Optional[Dict[str, Any]]:
        """Add the input field's text and clear the field on success"""
        if self.input_field is None:
            return None
        with self.lock:
            task = self.add(self.input_field.get('value', ''))
            if task:
                self.input_field.set('value', '')
            return task

    def toggle(self, task_id: int) -> Optional[Dict[str, Any]]:
        with self.lock:
            task = self.store.toggle(task_id)
            self.render()
            return task

    def remove(self, task_id: int) -> bool:
        with self.lock:
            removed = self.store.remove(task_id)
            self.render()
            return removed

    def edit_text(self, task_id: int, text: str) -> bool:
        with self.lock:
            changed = self.store.edit_text(task_id, text)
            self.render()
            return changed

    def start_edit(self, task_id: int) -> Optional[EditSession]:
        """
        Open in-place editing on an item

        Returns:
            The item's edit session, or None if the item is not on screen
        """
        with self.lock:
            item = self.reconciler.node_for(task_id)
            if item is None:
                self.logger.debug(f"Cannot edit task {task_id}, not on screen")
                return None

            session = self.sessions.get(task_id)
            if session is None:
                session = EditSession(task_id, item, self.store, on_finish=self._finish_edit)
                self.sessions[task_id] = session
            session.activate()
            self.render()
            return session

    # Focus across the input field and the list container

    def focused_node(self) -> Optional[ViewNode]:
        """The node receiving key input: focus inside the list wins over the input field"""
        node = self.container.focused_node()
        if node is None and self.input_field is not None and self.input_field.focused:
            return self.input_field
        return node

    def focus(self, node: ViewNode):
        """Move key focus to node, blurring the focused node of the other tree"""
        with self.lock:
            current = self.focused_node()
            if current is not None and current.root() is not node.root():
                current.blur()
            node.focus()

    def _finish_edit(self, session: EditSession, changed: bool, stale: bool):
        if self.sessions.get(session.task_id) is session:
            del self.sessions[session.task_id]
        # A stale session ends inside a reconciliation sweep, which is already running
        if not stale:
            self.render()

    # Delegated event routing

    def _item_id(self, target: ViewNode) -> Optional[int]:
        item = target.closest(Role.ITEM)
        if item is None or not self.container.contains(item):
            return None
        return item.get('item_id')

    def _on_click(self, event: ViewEvent):
        task_id = self._item_id(event.target)
        if task_id is None:
            return

        if event.target.role == Role.DELETE_BUTTON:
            self.remove(task_id)
        elif event.target.role in (Role.ITEM, Role.LABEL):
            self.toggle(task_id)

    def _on_double_click(self, event: ViewEvent):
        task_id = self._item_id(event.target)
        if task_id is not None and event.target.role == Role.LABEL:
            self.start_edit(task_id)

    def _on_keydown(self, event: ViewEvent):
        if event.target.role != Role.LABEL or event.key not in ('Enter', ' '):
            return
        task_id = self._item_id(event.target)
        if task_id is not None:
            event.prevent_default()
            self.toggle(task_id)

    def _on_input_key(self, event: ViewEvent):
        if event.key == 'Enter':
            self.add_from_input()
