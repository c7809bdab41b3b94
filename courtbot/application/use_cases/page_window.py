from __future__ import annotations

from datetime import date

from courtbot.application.use_cases.availability import AvailabilityOracle
from courtbot.application.utils.slot_grid import generate_slots
from courtbot.core.config import settings
from courtbot.domain.entities.page import PageView, SlotView
from courtbot.domain.entities.selection_state import SelectionState
from courtbot.domain.entities.slot import Slot


class PageWindow:
    def __init__(
        self,
        oracle: AvailabilityOracle,
        page_size: int | None = None,
        row_size: int | None = None,
    ) -> None:
        self._oracle = oracle
        self._page_size = page_size or settings.SLOTS_PER_PAGE
        self._row_size = row_size or settings.SLOTS_PER_ROW

    def page_of(self, slot: Slot) -> int | None:
        """Index of the page showing slot, or None if slot is not on the day's grid."""
        slots = generate_slots(slot.day)
        if slot not in slots:
            return None
        return slots.index(slot) // self._page_size

    def page(
        self,
        day: date,
        selection: SelectionState,
        page_index: int = 0,
        page_size: int | None = None,
    ) -> PageView:
        """
        Build one page of the day's slot grid annotated with availability.

        Out-of-range page indexes (from stale buttons) are clamped to the first/last page.
        """
        size = page_size or self._page_size
        slots = generate_slots(day)
        last_page = max(0, (len(slots) - 1) // size)
        index = min(max(page_index, 0), last_page)

        window = slots[index * size : (index + 1) * size]
        views = [SlotView(slot=slot, status=self._oracle.status(slot, selection)) for slot in window]
        rows = tuple(
            tuple(views[start : start + self._row_size]) for start in range(0, len(views), self._row_size)
        )

        return PageView(
            day=day,
            page_index=index,
            rows=rows,
            has_previous=index > 0,
            has_next=len(slots) > (index + 1) * size,
            can_confirm=not selection.is_empty,
        )
