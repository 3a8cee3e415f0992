"""
Exception types for the task core.
All of them are raised and caught inside the core; none escape to callers.
"""


class ZenFocusError(Exception):
    """Base class for ZenFocus errors"""


class StorageWriteError(ZenFocusError):
    """A storage slot could not be written (disk full, permissions, quota)"""

    def __init__(self, slot: str, reason: str):
        self.slot = slot
        self.reason = reason
        super().__init__(f"Failed to write slot '{slot}': {reason}")


class StorageCorruptionError(ZenFocusError):
    """Persisted content of a slot could not be parsed into tasks"""

    def __init__(self, slot: str, reason: str):
        self.slot = slot
        self.reason = reason
        super().__init__(f"Corrupt content in slot '{slot}': {reason}")


class StorageReadError(ZenFocusError):
    """A storage slot exists but could not be read (permissions, I/O error)"""

    def __init__(self, slot: str, reason: str):
        self.slot = slot
        self.reason = reason
        super().__init__(f"Failed to read slot '{slot}': {reason}")
