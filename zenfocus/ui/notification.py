"""
Toast notifications.
Messages expire on their own after a timeout or can be dismissed.
"""

import itertools
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional


KINDS = ('info', 'success', 'warning', 'error')


class NotificationCenter:
    """
    Queue of short-lived toast messages
    """

    def __init__(self, timeout: float = 5.0, clock: Optional[Callable[[], float]] = None):
        """
        Initialize notification center

        Args:
            timeout: Seconds before a toast is removed automatically
            clock: Time source in seconds
        """
        self.logger = logging.getLogger(__name__)
        self.timeout = timeout
        self.clock = clock or time.monotonic
        self._toasts: List[Dict[str, Any]] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def notify(self, message: str, kind: str = 'info') -> int:
        """
        Show a toast

        Args:
            message: Text to display
            kind: One of 'info', 'success', 'warning', 'error'

        Returns:
            Toast id
        """
        if kind not in KINDS:
            self.logger.debug(f"Unknown notification kind '{kind}', using 'info'")
            kind = 'info'

        with self._lock:
            toast = {'id': next(self._ids), 'message': message, 'kind': kind, 'created': self.clock()}
            self._toasts.append(toast)

        log = self.logger.warning if kind in ('warning', 'error') else self.logger.info
        log(f"Notification ({kind}): {message}")
        return toast['id']

    def pending(self) -> List[Dict[str, Any]]:
        """Toasts still on screen, oldest first"""
        now = self.clock()
        with self._lock:
            self._toasts = [t for t in self._toasts if now - t['created'] < self.timeout]
            return [{'id': t['id'], 'message': t['message'], 'kind': t['kind']} for t in self._toasts]

    def dismiss(self, toast_id: int) -> bool:
        """Close a toast before it expires"""
        with self._lock:
            before = len(self._toasts)
            self._toasts = [t for t in self._toasts if t['id'] != toast_id]
            return len(self._toasts) < before

    def clear(self):
        with self._lock:
            self._toasts.clear()
