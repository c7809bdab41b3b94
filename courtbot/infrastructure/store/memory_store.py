from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Callable

from courtbot.application.ports.session_store import SessionStorePort
from courtbot.domain.entities.selection_state import SelectionState


class MemorySessionStore(SessionStorePort):
    """Drafts live in process memory only and are lost on restart."""

    def __init__(self, processed_limit: int = 1000) -> None:
        self._states: dict[str, SelectionState] = {}
        self._key_locks: dict[str, threading.RLock] = {}
        self._processed: OrderedDict[int, None] = OrderedDict()
        self._processed_limit = processed_limit
        self._lock = threading.Lock()

    def get(self, key: str) -> SelectionState:
        with self._lock:
            return self._states.setdefault(key, SelectionState())

    def set(self, key: str, state: SelectionState) -> None:
        with self._lock:
            self._states[key] = state

    def update(self, key: str, fn: Callable[[SelectionState], SelectionState]) -> SelectionState:
        with self.lock_for(key):
            updated = fn(self.get(key))
            self.set(key, updated)
            return updated

    def lock_for(self, key: str) -> threading.RLock:
        with self._lock:
            return self._key_locks.setdefault(key, threading.RLock())

    def clear(self, key: str) -> None:
        with self._lock:
            self._states.pop(key, None)

    def has_processed(self, update_id: int) -> bool:
        with self._lock:
            return update_id in self._processed

    def mark_processed(self, update_id: int) -> None:
        with self._lock:
            self._processed[update_id] = None
            while len(self._processed) > self._processed_limit:
                self._processed.popitem(last=False)
