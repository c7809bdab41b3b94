from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable

from courtbot.application.ports.session_store import SessionStorePort
from courtbot.application.utils.adjacency import drop_slots, toggle_slot
from courtbot.domain.entities.selection_state import SelectionState
from courtbot.domain.entities.slot import Slot


class SelectionUseCase:
    """Per-conversation draft of slots the user has marked but not yet booked."""

    def __init__(self, store: SessionStorePort) -> None:
        self._store = store

    def get(self, key: str) -> SelectionState:
        return self._store.get(key)

    def toggle(self, key: str, slot: Slot) -> SelectionState:
        """
        Toggle slot in the draft stored under key.
        Raises NonContiguousSelectionError (draft unchanged) if the result would not be one run.
        """
        return self._store.update(key, lambda current: toggle_slot(current, slot))

    def clear(self, key: str) -> SelectionState:
        """Drop the selected slots but keep track of the rendered grid message."""
        return self._store.update(key, lambda current: replace(current, slots=()))

    def drop(self, key: str, slot_keys: Iterable[str]) -> SelectionState:
        """Remove slots someone else booked, keeping the longest run that is left."""
        lost = list(slot_keys)
        return self._store.update(key, lambda current: drop_slots(current, lost))

    def remember_message(self, key: str, message_id: int, day: date, page: int) -> SelectionState:
        return self._store.update(
            key,
            lambda current: replace(current, message_id=message_id, message_date=day, message_page=page),
        )
