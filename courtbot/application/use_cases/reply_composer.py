from __future__ import annotations

from datetime import date

from courtbot.application.utils.callback_data import encode_intent
from courtbot.domain.entities.booking import Booking
from courtbot.domain.entities.intent import (
    CancelBooking,
    ChangePage,
    CheckAvailability,
    ChooseDate,
    ConfirmBooking,
    ListBookings,
    SlotTaken,
    ToggleTime,
)
from courtbot.domain.entities.page import PageView, SlotStatus, SlotView
from courtbot.domain.entities.reply import Button, Reply


SLOT_GRID_TEXT = "Please choose a time slot(s):"
NON_CONTIGUOUS_TEXT = "Please select a continuous time interval."
EMPTY_SELECTION_TEXT = "No time slots selected."
CONFIRM_FAILED_TEXT = "There was an error in confirming your booking."
NO_BOOKINGS_TEXT = "You have no bookings."
CANCELLED_TEXT = "Your booking has been successfully canceled."
CANCEL_MISSING_TEXT = "That booking no longer exists."
CANCEL_NOT_OWNER_TEXT = "You can only cancel your own bookings."
CANCEL_FAILED_TEXT = "There was an error in canceling your booking."
UNKNOWN_USER_TEXT = "Unable to identify user."
SLOT_TAKEN_TEXT = "This time slot is already booked by someone else."
GENERIC_FAILURE_TEXT = "Something went wrong. Please try again."


class ReplyComposer:
    """Turns engine results into chat text plus inline keyboards."""

    def __init__(self, business_name: str = "Tennis Court Booking Bot") -> None:
        self._business_name = business_name

    def main_menu(self, first_name: str | None) -> Reply:
        name = first_name or "there"
        return Reply(
            text=f"Hello, {name}! Welcome to the {self._business_name}. What would you like to do?",
            keyboard=(
                (Button("Check Availability", encode_intent(CheckAvailability())),),
                (Button("List my Bookings", encode_intent(ListBookings())),),
            ),
        )

    def date_menu(self, dates: list[date]) -> Reply:
        return Reply(
            text="Please choose a date:",
            keyboard=tuple((Button(d.isoformat(), encode_intent(ChooseDate(day=d))),) for d in dates),
        )

    def slot_grid(self, page: PageView) -> Reply:
        keyboard: list[tuple[Button, ...]] = [tuple(self._slot_button(view) for view in row) for row in page.rows]

        navigation = []
        if page.has_previous:
            navigation.append(Button("<<", encode_intent(ChangePage(day=page.day, page=page.page_index - 1))))
        if page.has_next:
            navigation.append(Button(">>", encode_intent(ChangePage(day=page.day, page=page.page_index + 1))))
        if navigation:
            keyboard.append(tuple(navigation))

        if page.can_confirm:
            keyboard.append((Button("🟢 Confirm Booking", encode_intent(ConfirmBooking())),))

        return Reply(text=SLOT_GRID_TEXT, keyboard=tuple(keyboard))

    def booking_confirmed(self, booking: Booking) -> Reply:
        return Reply(text=f"Booking confirmed for time frame: {', '.join(booking.slot_keys)}")

    def booking_conflict(self, slot_keys: list[str]) -> Reply:
        taken = ", ".join(slot_keys)
        return Reply(text=f"Sorry, {taken} was just booked by someone else. It has been removed from your selection.")

    def booking_entry(self, booking: Booking) -> Reply:
        return Reply(
            text=f"Booking on {', '.join(booking.slot_keys)}",
            keyboard=((Button("Cancel Booking", encode_intent(CancelBooking(booking_id=booking.id or ""))),),),
        )

    def text(self, text: str) -> Reply:
        return Reply(text=text)

    def _slot_button(self, view: SlotView) -> Button:
        label = view.slot.time_label
        if view.status is SlotStatus.HELD_BY_ME:
            return Button(f"🟢 {label}", encode_intent(ToggleTime(slot=view.slot)))
        if view.status is SlotStatus.HELD_BY_OTHER:
            return Button(f"❌ {label}", encode_intent(SlotTaken()))
        return Button(label, encode_intent(ToggleTime(slot=view.slot)))
