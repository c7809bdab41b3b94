from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union

from courtbot.domain.entities.slot import Slot


@dataclass(frozen=True)
class Start:
    """Any plain text message: show the main menu."""


@dataclass(frozen=True)
class CheckAvailability:
    pass


@dataclass(frozen=True)
class ChooseDate:
    day: date


@dataclass(frozen=True)
class ToggleTime:
    slot: Slot


@dataclass(frozen=True)
class ChangePage:
    day: date
    page: int


@dataclass(frozen=True)
class ListBookings:
    pass


@dataclass(frozen=True)
class CancelBooking:
    booking_id: str


@dataclass(frozen=True)
class ConfirmBooking:
    pass


@dataclass(frozen=True)
class SlotTaken:
    """Press on a slot someone else already holds."""


Intent = Union[
    Start,
    CheckAvailability,
    ChooseDate,
    ToggleTime,
    ChangePage,
    ListBookings,
    CancelBooking,
    ConfirmBooking,
    SlotTaken,
]
