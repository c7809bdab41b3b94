from __future__ import annotations

from datetime import date, datetime, time, timedelta

from courtbot.core.config import settings
from courtbot.domain.entities.slot import SLOT_TICK, Slot


def generate_slots(
    day: date,
    opening_hour: int | None = None,
    closing_hour: int | None = None,
) -> list[Slot]:
    """
    Enumerate the bookable slots of a day in start order.

    The last slot starts half an hour after closing_hour, so the default 7..22
    window yields 07:00, 07:30, ..., 22:30 (32 slots).
    """
    first_hour = settings.OPENING_HOUR if opening_hour is None else opening_hour
    last_hour = settings.CLOSING_HOUR if closing_hour is None else closing_hour

    current = datetime.combine(day, time(hour=first_hour))
    end = datetime.combine(day, time(hour=last_hour)) + timedelta(hours=1)

    slots: list[Slot] = []
    while current < end:
        slots.append(Slot(day=day, start=current.time()))
        current += SLOT_TICK
    return slots


def upcoming_dates(today: date, days: int | None = None) -> list[date]:
    count = settings.BOOKING_DAYS_AHEAD if days is None else days
    return [today + timedelta(days=offset) for offset in range(count)]
