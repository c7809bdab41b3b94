from __future__ import annotations

from courtbot.application.ports.ledger import LedgerPort
from courtbot.domain.entities.page import SlotStatus
from courtbot.domain.entities.selection_state import SelectionState
from courtbot.domain.entities.slot import Slot


class AvailabilityOracle:
    """
    Tells whether a slot is free, in the caller's own draft, or booked by anyone.

    Every call reads the ledger afresh; results are only as current as that read.
    """

    def __init__(self, ledger: LedgerPort) -> None:
        self._ledger = ledger

    def status(self, slot: Slot, selection: SelectionState) -> SlotStatus:
        if selection.contains(slot):
            return SlotStatus.HELD_BY_ME
        if self._ledger.find_by_slot(slot.key):
            return SlotStatus.HELD_BY_OTHER
        return SlotStatus.FREE
