from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from courtbot.domain.entities.slot import Slot


@dataclass(frozen=True)
class SelectionState:
    slots: tuple[Slot, ...] = ()  # always sorted by start
    # Last slot-grid message rendered for this draft, edited in place on refresh
    message_id: int | None = None
    message_date: date | None = None
    message_page: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.slots

    def contains(self, slot: Slot) -> bool:
        return slot in self.slots

    @property
    def slot_keys(self) -> list[str]:
        return [slot.key for slot in self.slots]
