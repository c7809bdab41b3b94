from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from courtbot.application.exceptions import NonContiguousSelectionError
from courtbot.domain.entities.selection_state import SelectionState
from courtbot.domain.entities.slot import Slot


def is_adjacent(selected: Iterable[Slot], slot: Slot) -> bool:
    """True if slot is exactly one tick before or after any selected slot."""
    return any(slot.is_adjacent_to(existing) for existing in selected)


def is_contiguous(slots: Iterable[Slot]) -> bool:
    ordered = sorted(slots)
    return all(b.is_adjacent_to(a) for a, b in zip(ordered, ordered[1:]))


def toggle_slot(state: SelectionState, slot: Slot) -> SelectionState:
    """
    Add or remove slot from the draft, keeping it one contiguous run.

    Adding is accepted when the draft is empty or slot touches any selected slot.
    Removing is accepted for either end of the run; removing an interior slot
    would split the run and is refused. Raises NonContiguousSelectionError and
    leaves state untouched on refusal.
    """
    if state.contains(slot):
        remaining = tuple(s for s in state.slots if s != slot)
        if not is_contiguous(remaining):
            raise NonContiguousSelectionError(f"Removing {slot} would split the selection")
        return replace(state, slots=remaining)

    if state.slots and not is_adjacent(state.slots, slot):
        raise NonContiguousSelectionError(f"{slot} is not adjacent to the current selection")
    return replace(state, slots=tuple(sorted(state.slots + (slot,))))


def longest_run(slots: Iterable[Slot]) -> tuple[Slot, ...]:
    """Longest contiguous run in slots; the earliest one wins a tie."""
    runs: list[list[Slot]] = []
    for slot in sorted(slots):
        if runs and slot.is_adjacent_to(runs[-1][-1]):
            runs[-1].append(slot)
        else:
            runs.append([slot])
    best = max(runs, key=len, default=[])
    return tuple(best)


def drop_slots(state: SelectionState, slot_keys: Iterable[str]) -> SelectionState:
    """Remove the given slots from the draft, keeping the longest run that is left."""
    lost = set(slot_keys)
    return replace(state, slots=longest_run(s for s in state.slots if s.key not in lost))
