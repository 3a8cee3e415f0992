"""
Named storage slots.
Each slot holds one string value; the file backend keeps one file per slot.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Optional

from zenfocus.core.errors import StorageCorruptionError, StorageReadError, StorageWriteError


class SlotStorage:
    """
    Directory-backed key/value storage of raw strings
    """

    def __init__(self, directory: str):
        """
        Initialize slot storage

        Args:
            directory: Directory holding one file per slot
        """
        self.directory = Path(directory)
        self.logger = logging.getLogger(__name__)

    def _path(self, slot: str) -> Path:
        return self.directory / f"{slot}.json"

    def get(self, slot: str) -> Optional[str]:
        """
        Read the raw value of a slot

        Args:
            slot: Slot name

        Returns:
            Stored string, or None if the slot was never written

        Raises:
            StorageCorruptionError: if the file is not valid UTF-8
            StorageReadError: if the file exists but cannot be read
        """
        path = self._path(slot)
        if not path.exists():
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise StorageCorruptionError(slot, f"not UTF-8 text ({e})") from e
        except OSError as e:
            raise StorageReadError(slot, str(e)) from e

    def set(self, slot: str, value: str):
        """
        Write the whole value of a slot

        Args:
            slot: Slot name
            value: String to store

        Raises:
            StorageWriteError: if the file cannot be written
        """
        path = self._path(slot)
        tmp_path = path.with_suffix('.tmp')

        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageWriteError(slot, str(e)) from e

        self.logger.debug(f"Wrote {len(value)} bytes to slot '{slot}'")

    def remove(self, slot: str):
        """Delete a slot if it exists"""
        path = self._path(slot)
        if path.exists():
            path.unlink()
            self.logger.debug(f"Removed slot '{slot}'")


class MemoryStorage:
    """In-memory storage with the same interface as SlotStorage"""

    def __init__(self, initial: Optional[Dict[str, str]] = None, fail_writes: bool = False,
                 fail_reads: bool = False):
        self.slots: Dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads
        self.write_count = 0

    def get(self, slot: str) -> Optional[str]:
        if self.fail_reads and slot in self.slots:
            raise StorageReadError(slot, "device not ready")
        return self.slots.get(slot)

    def set(self, slot: str, value: str):
        if self.fail_writes:
            raise StorageWriteError(slot, "quota exceeded")
        self.slots[slot] = value
        self.write_count += 1

    def remove(self, slot: str):
        self.slots.pop(slot, None)
