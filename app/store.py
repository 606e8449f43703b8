"""
In-memory store
Holds serialized sessions in a dict, keyed by storage key.
Same get/set shape as the DB-backed store in repository.py, so the game
doesn't care which one it is given.
"""

from typing import Dict, Optional, Protocol
from threading import RLock


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self) -> None:
        self._items: Dict[str, str] = {}
        self._lock = RLock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value
