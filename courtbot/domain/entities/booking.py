from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from courtbot.domain.entities.slot import SLOT_TICK, Slot


@dataclass(frozen=True)
class Booking:
    """
    A committed, contiguous run of slots owned by one user.

    Invariant: slots is non-empty, sorted and free of gaps.
    """

    user_id: int
    chat_id: int
    username: str | None
    slots: tuple[Slot, ...]
    booked_at: datetime
    id: str | None = None  # assigned by the ledger on insert

    def __post_init__(self):
        if not self.slots:
            raise ValueError("A booking needs at least one slot")
        ordered = tuple(sorted(self.slots))
        for previous, current in zip(ordered, ordered[1:]):
            if not current.is_adjacent_to(previous):
                raise ValueError(f"Booking slots are not contiguous: {previous} -> {current}")
        object.__setattr__(self, "slots", ordered)

    @property
    def slot_keys(self) -> list[str]:
        return [slot.key for slot in self.slots]

    def overlaps(self, other: Booking) -> bool:
        return bool(set(self.slots) & set(other.slots))

    @property
    def ends_at(self) -> datetime:
        return self.slots[-1].starts_at + SLOT_TICK

    def __str__(self) -> str:
        return f"{self.slots[0].key}–{self.ends_at.strftime('%H:%M')}"
