from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from courtbot.domain.entities.slot import Slot


class SlotStatus(str, Enum):
    FREE = "free"
    HELD_BY_ME = "held_by_me"
    HELD_BY_OTHER = "held_by_other"


@dataclass(frozen=True)
class SlotView:
    slot: Slot
    status: SlotStatus


@dataclass(frozen=True)
class PageView:
    day: date
    page_index: int
    rows: tuple[tuple[SlotView, ...], ...]
    has_previous: bool
    has_next: bool
    can_confirm: bool

    @property
    def slots(self) -> list[SlotView]:
        return [view for row in self.rows for view in row]
