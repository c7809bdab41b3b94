from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

SLOT_TICK = timedelta(minutes=30)
KEY_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True, order=True)
class Slot:
    """One bookable 30-minute unit on the court, identified by date and start time."""

    day: date
    start: time

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.day, self.start)

    @property
    def key(self) -> str:
        # Same shape the ledger stores in a booking's selectedTimes array.
        return self.starts_at.strftime(KEY_FORMAT)

    @property
    def time_label(self) -> str:
        return self.start.strftime("%H:%M")

    def is_adjacent_to(self, other: Slot) -> bool:
        return abs(self.starts_at - other.starts_at) == SLOT_TICK

    @staticmethod
    def from_key(key: str) -> Slot:
        parsed = datetime.strptime(key.strip(), KEY_FORMAT)
        return Slot(day=parsed.date(), start=parsed.time())

    @staticmethod
    def from_parts(day: str, time_of_day: str) -> Slot:
        """Build a slot from "YYYY-MM-DD" and "HH:MM"; raises ValueError when malformed."""
        return Slot.from_key(f"{day} {time_of_day}")

    def __str__(self) -> str:
        return self.key
