from __future__ import annotations

from abc import ABC, abstractmethod

from courtbot.domain.entities.booking import Booking


class LedgerPort(ABC):
    @abstractmethod
    def insert(self, booking: Booking) -> str:
        """Store booking unconditionally. Returns the ledger-assigned id."""
        raise NotImplementedError

    @abstractmethod
    def commit_if_no_overlap(self, booking: Booking) -> str:
        """
        Atomically store booking unless any of its slots is already booked.

        Returns the ledger-assigned id.
        Raises SlotConflictError naming the taken slots; nothing is written in that case.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, booking_id: str) -> bool:
        """Delete booking. Returns False if it did not exist."""
        raise NotImplementedError

    @abstractmethod
    def find_by_owner(self, user_id: int) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_by_slot(self, slot_key: str) -> list[Booking]:
        """Bookings whose slot set contains slot_key."""
        raise NotImplementedError
