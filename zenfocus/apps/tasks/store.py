"""
Task Store

Owns the ordered task list and its persistence in a single storage slot.
"""

import json
import time
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

from zenfocus.core.errors import StorageCorruptionError, StorageReadError, StorageWriteError


DEFAULT_SLOT = 'zenFocusTasks'


def parse_tasks(raw: str, slot: str = DEFAULT_SLOT) -> List[Dict[str, Any]]:
    """
    Parse the persisted JSON array of tasks

    Args:
        raw: Raw slot content
        slot: Slot name (for error reporting)

    Returns:
        List of task dicts in stored order

    Raises:
        StorageCorruptionError: if the content is not a valid task array
    """
    try:
        data = json.loads(raw)
    except (ValueError, TypeError) as e:
        raise StorageCorruptionError(slot, f"invalid JSON ({e})") from e

    if not isinstance(data, list):
        raise StorageCorruptionError(slot, f"expected array, got {type(data).__name__}")

    tasks = []
    seen_ids = set()
    for entry in data:
        if not isinstance(entry, dict):
            raise StorageCorruptionError(slot, "task entry is not an object")

        task_id = entry.get('id')
        text = entry.get('text')
        completed = entry.get('completed')

        # bool is an int subclass, reject it as an id
        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise StorageCorruptionError(slot, f"invalid task id: {task_id!r}")
        if not isinstance(text, str) or not isinstance(completed, bool):
            raise StorageCorruptionError(slot, f"invalid fields for task {task_id}")
        if task_id in seen_ids:
            raise StorageCorruptionError(slot, f"duplicate task id: {task_id}")

        seen_ids.add(task_id)
        tasks.append({'id': task_id, 'text': text, 'completed': completed})

    return tasks


class TaskStore:
    """Manages the task list and its persistence"""

    def __init__(self, storage, slot: str = DEFAULT_SLOT,
                 clock: Optional[Callable[[], float]] = None,
                 on_corruption: Optional[Callable[[str], None]] = None,
                 on_write_failure: Optional[Callable[[str], None]] = None):
        """
        Initialize TaskStore

        Args:
            storage: Slot storage backend (SlotStorage or MemoryStorage)
            slot: Name of the slot holding the task array
            clock: Time source in seconds, used for id allocation
            on_corruption: Called with a message when stored data is discarded
            on_write_failure: Called with a message when persisting fails
        """
        self.storage = storage
        self.slot = slot
        self.clock = clock or time.time
        self.on_corruption = on_corruption
        self.on_write_failure = on_write_failure
        self.logger = logging.getLogger(__name__)

        self._tasks: List[Dict[str, Any]] = []
        self._last_id = 0

    def load(self) -> List[Dict[str, Any]]:
        """
        Load tasks from the storage slot

        Corrupt content is discarded and the slot is rewritten to an empty array.
        A slot that cannot be read is left untouched.

        Returns:
            Copy of the loaded task list
        """
        try:
            raw = self.storage.get(self.slot)
            if raw is None:
                self.logger.info(f"No stored tasks in slot '{self.slot}', starting with empty list")
                self._tasks = []
                return self.tasks
            self._tasks = parse_tasks(raw, self.slot)
        except StorageReadError as e:
            self.logger.error(f"{e}. Keeping stored tasks untouched")
            return self.tasks
        except StorageCorruptionError as e:
            self.logger.warning(f"{e}. Resetting to empty list")
            self._tasks = []
            self.persist()
            if self.on_corruption:
                self.on_corruption("Saved tasks were corrupted and have been reset")
            return self.tasks

        self._last_id = max([self._last_id] + [t['id'] for t in self._tasks])
        self.logger.info(f"Loaded {len(self._tasks)} tasks from slot '{self.slot}'")
        return self.tasks

    def persist(self) -> bool:
        """
        Serialize the full task list into the storage slot

        Returns:
            True if successful, False otherwise
        """
        try:
            self.storage.set(self.slot, json.dumps(self._tasks))
        except (StorageWriteError, TypeError, ValueError) as e:
            self.logger.error(f"Failed to save tasks: {e}")
            if self.on_write_failure:
                self.on_write_failure("Could not save tasks; changes are kept until the next save")
            return False

        self.logger.debug(f"Saved {len(self._tasks)} tasks")
        return True

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped past the last id when the clock has not moved
        candidate = int(self.clock() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def _find(self, task_id: int) -> Optional[Dict[str, Any]]:
        for task in self._tasks:
            if task['id'] == task_id:
                return task
        return None

    def add(self, text: str) -> Optional[Dict[str, Any]]:
        """
        Append a new task

        Args:
            text: Task text, trimmed before use

        Returns:
            Copy of the new task, or None if the trimmed text was empty
        """
        text = (text or '').strip()
        if not text:
            self.logger.debug("Ignoring empty task text")
            return None

        task = {'id': self._next_id(), 'text': text, 'completed': False}
        self._tasks.append(task)
        self.persist()
        self.logger.info(f"Added task {task['id']}: {text}")
        return dict(task)

    def remove(self, task_id: int) -> bool:
        """
        Remove a task

        Returns:
            True if a task was removed
        """
        remaining = [t for t in self._tasks if t['id'] != task_id]
        removed = len(remaining) < len(self._tasks)
        self._tasks = remaining
        self.persist()

        if removed:
            self.logger.info(f"Removed task {task_id}")
        else:
            self.logger.debug(f"Remove ignored, no task {task_id}")
        return removed

    def toggle(self, task_id: int) -> Optional[Dict[str, Any]]:
        """
        Flip the completion flag of a task

        Returns:
            Copy of the updated task, or None if it does not exist
        """
        task = self._find(task_id)
        if task is None:
            self.logger.debug(f"Toggle ignored, no task {task_id}")
            return None

        task['completed'] = not task['completed']
        self.persist()
        self.logger.info(f"Toggled task {task_id}: {task['completed']}")
        return dict(task)

    def edit_text(self, task_id: int, new_text: str) -> bool:
        """
        Replace the text of a task

        Blank text keeps the original. Nothing is persisted when the text is unchanged.

        Returns:
            True if the text changed
        """
        new_text = (new_text or '').strip()
        if not new_text:
            self.logger.debug(f"Edit ignored for task {task_id}: empty text")
            return False

        task = self._find(task_id)
        if task is None:
            self.logger.debug(f"Edit ignored, no task {task_id}")
            return False
        if task['text'] == new_text:
            return False

        task['text'] = new_text
        self.persist()
        self.logger.info(f"Edited task {task_id}: {new_text}")
        return True

    def get(self, task_id: int) -> Optional[Dict[str, Any]]:
        """Get a copy of a task by id"""
        task = self._find(task_id)
        return dict(task) if task is not None else None

    def ids(self) -> List[int]:
        """Task ids in list order"""
        return [t['id'] for t in self._tasks]

    @property
    def tasks(self) -> List[Dict[str, Any]]:
        """Copies of all tasks in list order"""
        return [dict(t) for t in self._tasks]

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self._tasks)
