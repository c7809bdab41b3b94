from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from courtbot.application.exceptions import (
    BookingNotFoundError,
    EmptySelectionError,
    NonContiguousSelectionError,
    NotBookingOwnerError,
    SlotConflictError,
)
from courtbot.application.ports.ledger import LedgerPort
from courtbot.application.use_cases.selection import SelectionUseCase
from courtbot.domain.entities.booking import Booking


@dataclass(frozen=True)
class BookingUser:
    user_id: int
    chat_id: int
    username: str | None = None


class BookingUseCase:
    """Commits drafts into the ledger and manages existing bookings."""

    def __init__(self, ledger: LedgerPort, selection: SelectionUseCase) -> None:
        self._ledger = ledger
        self._selection = selection
        self._logger = logging.getLogger(__name__)

    def confirm(self, key: str, user: BookingUser) -> Booking:
        """
        Book the draft stored under key for user.

        The overlap check and the write are one ledger call, so two users racing
        for the same slots end up with exactly one booking.
        On SlotConflictError the lost slots leave the draft and the longest run that is
        left stays selected. On ledger failure the draft is kept so the user can retry.
        """
        state = self._selection.get(key)
        if state.is_empty:
            raise EmptySelectionError("No time slots selected")

        try:
            booking = Booking(
                user_id=user.user_id,
                chat_id=user.chat_id,
                username=user.username,
                slots=state.slots,
                booked_at=datetime.now(timezone.utc),
            )
        except ValueError as e:
            raise NonContiguousSelectionError(str(e)) from e

        try:
            booking_id = self._ledger.commit_if_no_overlap(booking)
        except SlotConflictError as e:
            self._logger.info(
                "Booking lost to an existing booking",
                extra={"user_id": user.user_id, "slot": ", ".join(e.slot_keys), "reason": e.reason.value},
            )
            self._selection.drop(key, e.slot_keys)
            raise

        self._selection.clear(key)
        committed = replace(booking, id=booking_id)
        self._logger.info(
            "Booking confirmed",
            extra={"booking_id": booking_id, "user_id": user.user_id, "slot": str(committed)},
        )
        return committed

    def cancel(self, booking_id: str, user_id: int) -> Booking:
        """Delete a booking owned by user_id. Returns the deleted booking."""
        booking = self._ledger.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} does not exist")
        if booking.user_id != user_id:
            self._logger.warning(
                "Cancel refused for non-owner",
                extra={"booking_id": booking_id, "user_id": user_id, "reason": "not_owner"},
            )
            raise NotBookingOwnerError(f"Booking {booking_id} belongs to another user")

        if not self._ledger.delete(booking_id):
            # Deleted concurrently between the read and the delete.
            raise BookingNotFoundError(f"Booking {booking_id} does not exist")

        self._logger.info("Booking cancelled", extra={"booking_id": booking_id, "user_id": user_id})
        return booking

    def list_for(self, user_id: int) -> list[Booking]:
        return sorted(self._ledger.find_by_owner(user_id), key=lambda b: b.slots[0])
