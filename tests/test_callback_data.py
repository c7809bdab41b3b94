"""
Tests for decoding button callback tokens into intents.
"""

from __future__ import annotations

from datetime import date

from courtbot.application.utils.callback_data import decode_intent, encode_intent
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
from courtbot.domain.entities.slot import Slot


def test_decodes_every_action():
    assert decode_intent("check-availability") == CheckAvailability()
    assert decode_intent("date_2024-06-01") == ChooseDate(day=date(2024, 6, 1))
    assert decode_intent("toggle-time_2024-06-01_09:30") == ToggleTime(slot=Slot.from_key("2024-06-01 09:30"))
    assert decode_intent("change-page_2024-06-01_2") == ChangePage(day=date(2024, 6, 1), page=2)
    assert decode_intent("list-bookings") == ListBookings()
    assert decode_intent("cancel-booking_AbC123") == CancelBooking(booking_id="AbC123")
    assert decode_intent("confirm-booking") == ConfirmBooking()
    assert decode_intent("booked") == SlotTaken()


def test_encoded_tokens_use_action_vocabulary():
    assert encode_intent(ToggleTime(slot=Slot.from_key("2024-06-01 09:30"))) == "toggle-time_2024-06-01_09:30"
    assert encode_intent(ChangePage(day=date(2024, 6, 1), page=1)) == "change-page_2024-06-01_1"
    assert encode_intent(CancelBooking(booking_id="x1")) == "cancel-booking_x1"


def test_malformed_tokens_decode_to_none():
    assert decode_intent(None) is None
    assert decode_intent("") is None
    assert decode_intent("teleport") is None
    assert decode_intent("date_tomorrow") is None
    assert decode_intent("toggle-time_2024-06-01") is None
    assert decode_intent("toggle-time_2024-06-01_25:00") is None
    assert decode_intent("change-page_2024-06-01_next") is None
    assert decode_intent("cancel-booking") is None
