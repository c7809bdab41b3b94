"""
Tests for the daily slot grid and the date menu.
"""

from __future__ import annotations

from datetime import date, time

from courtbot.application.utils.slot_grid import generate_slots, upcoming_dates
from courtbot.domain.entities.slot import Slot


DAY = date(2024, 6, 1)


def test_default_grid_covers_operating_window():
    """07:00 through 22:30 in half-hour steps gives 32 slots."""
    slots = generate_slots(DAY, opening_hour=7, closing_hour=22)

    assert len(slots) == 32
    assert slots[0] == Slot(day=DAY, start=time(7, 0))
    assert slots[-1] == Slot(day=DAY, start=time(22, 30))
    assert all(b.is_adjacent_to(a) for a, b in zip(slots, slots[1:]))


def test_grid_is_deterministic():
    assert generate_slots(DAY, 7, 22) == generate_slots(DAY, 7, 22)


def test_slot_key_round_trip_and_adjacency():
    slot = Slot.from_parts("2024-06-01", "09:00")

    assert slot.key == "2024-06-01 09:00"
    assert Slot.from_key(slot.key) == slot
    assert slot.is_adjacent_to(Slot.from_key("2024-06-01 09:30"))
    assert slot.is_adjacent_to(Slot.from_key("2024-06-01 08:30"))
    assert not slot.is_adjacent_to(Slot.from_key("2024-06-01 10:00"))
    assert not slot.is_adjacent_to(Slot.from_key("2024-06-02 09:00"))


def test_upcoming_dates_starts_today():
    dates = upcoming_dates(DAY, days=7)

    assert dates[0] == DAY
    assert dates[-1] == date(2024, 6, 7)
    assert len(dates) == 7
