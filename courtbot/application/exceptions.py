from __future__ import annotations

from enum import Enum


class RejectionReason(str, Enum):
    NON_CONTIGUOUS = "non_contiguous"
    EMPTY_SELECTION = "empty_selection"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    NOT_OWNER = "not_owner"


class BookingRejected(Exception):
    """Raised when a selection or booking operation is refused. State is left unchanged."""

    reason: RejectionReason

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason.value)


class NonContiguousSelectionError(BookingRejected):
    reason = RejectionReason.NON_CONTIGUOUS


class EmptySelectionError(BookingRejected):
    reason = RejectionReason.EMPTY_SELECTION


class SlotConflictError(BookingRejected):
    """Raised when a commit loses to an existing booking holding some of the same slots."""

    reason = RejectionReason.CONFLICT

    def __init__(self, slot_keys: list[str]) -> None:
        self.slot_keys = sorted(slot_keys)
        super().__init__(f"Slots already booked: {', '.join(self.slot_keys)}")


class BookingNotFoundError(BookingRejected):
    reason = RejectionReason.NOT_FOUND


class NotBookingOwnerError(BookingRejected):
    reason = RejectionReason.NOT_OWNER


class LedgerUnavailableError(RuntimeError):
    """Raised when the booking ledger fails (network errors, permissions, service unavailable)."""
    pass


class PlatformError(RuntimeError):
    """Raised when the chat platform rejects or fails a send/edit call."""
    pass
