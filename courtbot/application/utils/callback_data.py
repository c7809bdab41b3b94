"""
Encoding of inline-button presses as flat callback tokens.

A token is ``action_param1_param2...``; dates are ``YYYY-MM-DD`` and times
``HH:MM`` so neither contains the delimiter. Tokens are decoded once here into
the intent dataclasses; nothing past this module looks at raw strings.
"""

from __future__ import annotations

import logging
from datetime import date

from courtbot.domain.entities.intent import (
    CancelBooking,
    ChangePage,
    CheckAvailability,
    ChooseDate,
    ConfirmBooking,
    Intent,
    ListBookings,
    SlotTaken,
    ToggleTime,
)
from courtbot.domain.entities.slot import Slot


logger = logging.getLogger(__name__)

DELIMITER = "_"

CHECK_AVAILABILITY = "check-availability"
DATE = "date"
TOGGLE_TIME = "toggle-time"
CHANGE_PAGE = "change-page"
LIST_BOOKINGS = "list-bookings"
CANCEL_BOOKING = "cancel-booking"
CONFIRM_BOOKING = "confirm-booking"
BOOKED = "booked"


def encode_intent(intent: Intent) -> str:
    if isinstance(intent, CheckAvailability):
        return CHECK_AVAILABILITY
    if isinstance(intent, ChooseDate):
        return DELIMITER.join((DATE, intent.day.isoformat()))
    if isinstance(intent, ToggleTime):
        return DELIMITER.join((TOGGLE_TIME, intent.slot.day.isoformat(), intent.slot.time_label))
    if isinstance(intent, ChangePage):
        return DELIMITER.join((CHANGE_PAGE, intent.day.isoformat(), str(intent.page)))
    if isinstance(intent, ListBookings):
        return LIST_BOOKINGS
    if isinstance(intent, CancelBooking):
        return DELIMITER.join((CANCEL_BOOKING, intent.booking_id))
    if isinstance(intent, ConfirmBooking):
        return CONFIRM_BOOKING
    if isinstance(intent, SlotTaken):
        return BOOKED
    raise TypeError(f"Intent {intent!r} has no callback token")


def decode_intent(data: str | None) -> Intent | None:
    """Decode a callback token. Returns None for unknown or malformed tokens."""
    if not data:
        return None

    action, _, rest = data.partition(DELIMITER)
    params = rest.split(DELIMITER) if rest else []

    try:
        if action == CHECK_AVAILABILITY:
            return CheckAvailability()
        if action == DATE and len(params) == 1:
            return ChooseDate(day=date.fromisoformat(params[0]))
        if action == TOGGLE_TIME and len(params) == 2:
            return ToggleTime(slot=Slot.from_parts(params[0], params[1]))
        if action == CHANGE_PAGE and len(params) == 2:
            return ChangePage(day=date.fromisoformat(params[0]), page=int(params[1]))
        if action == LIST_BOOKINGS:
            return ListBookings()
        if action == CANCEL_BOOKING and rest:
            # Booking ids are opaque; keep everything after the action.
            return CancelBooking(booking_id=rest)
        if action == CONFIRM_BOOKING:
            return ConfirmBooking()
        if action == BOOKED:
            return SlotTaken()
    except ValueError:
        logger.warning("Malformed callback token", extra={"reason": data})
        return None

    logger.warning("Unknown callback token", extra={"reason": data})
    return None
