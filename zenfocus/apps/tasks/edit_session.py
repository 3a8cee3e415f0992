"""
In-place editing of one task's text.
A session swaps the item's label for an edit field and commits on focus loss.
"""

from enum import Enum
from typing import Callable, Optional
import logging

from zenfocus.ui.view import Role, ViewEvent, ViewNode
from zenfocus.apps.tasks.reconciler import find_part


class EditState(Enum):
    """Edit session states"""
    DISPLAY = "display"
    EDITING = "editing"


class EditSession:
    """
    Display -> Editing -> Display state machine for a single item
    """

    def __init__(self, task_id: int, item: ViewNode, store,
                 on_finish: Optional[Callable[['EditSession', bool, bool], None]] = None):
        """
        Initialize edit session

        Args:
            task_id: Id of the task being edited
            item: Item node the edit field is attached to
            store: TaskStore receiving the committed text
            on_finish: Called as on_finish(session, changed, stale) after teardown
        """
        self.logger = logging.getLogger(__name__)
        self.task_id = task_id
        self.item = item
        self.store = store
        self.on_finish = on_finish

        self.state = EditState.DISPLAY
        self.field: Optional[ViewNode] = None
        self.original_text = ''

    @property
    def editing(self) -> bool:
        return self.state == EditState.EDITING

    def activate(self) -> bool:
        """
        Enter edit mode

        Returns:
            True if the session switched to editing, False if it already was
        """
        if self.editing:
            return False

        label = find_part(self.item, Role.LABEL)
        self.original_text = label.get('text', '') if label is not None else ''

        self.field = ViewNode(Role.EDIT_FIELD, value=self.original_text)
        self.field.add_listener('blur', self._on_blur_event)
        self.field.add_listener('keydown', self._on_key_event)

        if label is not None:
            label.set('hidden', True)
        self.item.insert_before(self.field, label)

        self.state = EditState.EDITING
        self.field.focus()
        self.logger.debug(f"Editing task {self.task_id}")
        return True

    def set_value(self, value: str):
        """Replace the field's current value (typing)"""
        if self.editing:
            self.field.set('value', value)

    @property
    def value(self) -> Optional[str]:
        return self.field.get('value') if self.editing else None

    def _on_blur_event(self, event: ViewEvent):
        self.on_blur()

    def _on_key_event(self, event: ViewEvent):
        event.stop_propagation()
        self.on_key(event.key)

    def on_key(self, key: str):
        """
        Handle a key pressed in the edit field

        Args:
            key: 'Enter' commits, 'Escape' restores the original text and commits
        """
        if not self.editing:
            return
        if key == 'Enter':
            self.on_blur()
        elif key == 'Escape':
            self.field.set('value', self.original_text)
            self.on_blur()

    def on_blur(self):
        """Commit path, run whenever the edit field loses focus"""
        if not self.editing:
            return

        value = self.field.get('value', '')
        # The item may have been swept by a reconciliation pass while editing
        stale = self.field.parent is not self.item or self.item.parent is None

        self._teardown()

        changed = False
        if stale:
            self.logger.debug(f"Ignoring edit of task {self.task_id}, item no longer on screen")
        else:
            trimmed = value.strip()
            if trimmed and trimmed != self.original_text:
                changed = self.store.edit_text(self.task_id, trimmed)
            elif not trimmed:
                self.logger.debug(f"Discarding empty edit of task {self.task_id}")

        if self.on_finish:
            self.on_finish(self, changed, stale)

    def _teardown(self):
        # Leave EDITING first so the blur fired by removing the field is ignored
        self.state = EditState.DISPLAY
        field = self.field
        self.field = None

        field.remove_listener('blur', self._on_blur_event)
        field.remove_listener('keydown', self._on_key_event)
        field.remove()

        label = find_part(self.item, Role.LABEL)
        if label is not None and label.get('hidden'):
            label.set('hidden', False)
