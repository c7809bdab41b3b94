from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace

from courtbot.application.exceptions import SlotConflictError
from courtbot.application.ports.ledger import LedgerPort
from courtbot.domain.entities.booking import Booking


class MemoryLedger(LedgerPort):
    """Process-local ledger for dev and tests. All reads and writes share one lock."""

    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def insert(self, booking: Booking) -> str:
        with self._lock:
            return self._insert_locked(booking)

    def commit_if_no_overlap(self, booking: Booking) -> str:
        wanted = set(booking.slot_keys)
        with self._lock:
            taken = {
                key
                for existing in self._bookings.values()
                for key in existing.slot_keys
                if key in wanted
            }
            if taken:
                raise SlotConflictError(sorted(taken))
            return self._insert_locked(booking)

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def delete(self, booking_id: str) -> bool:
        with self._lock:
            return self._bookings.pop(booking_id, None) is not None

    def find_by_owner(self, user_id: int) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if b.user_id == user_id]

    def find_by_slot(self, slot_key: str) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if slot_key in b.slot_keys]

    def _insert_locked(self, booking: Booking) -> str:
        booking_id = uuid.uuid4().hex
        self._bookings[booking_id] = replace(booking, id=booking_id)
        self._logger.info(
            "Memory ledger booking stored",
            extra={"booking_id": booking_id, "user_id": booking.user_id, "slot": str(booking)},
        )
        return booking_id
