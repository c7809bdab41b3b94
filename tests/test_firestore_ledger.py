"""
Tests for the Firestore ledger against an in-memory fake client (no Firestore connection needed).
"""

from __future__ import annotations

import itertools
from datetime import datetime, timezone

import pytest
from google.api_core import exceptions as core_exceptions

from courtbot.application.exceptions import LedgerUnavailableError, SlotConflictError
from courtbot.domain.entities.booking import Booking
from courtbot.domain.entities.slot import Slot
from courtbot.infrastructure.ledger import firestore_ledger
from courtbot.infrastructure.ledger.firestore_ledger import FirestoreLedger, _to_document, lock_id


class FakeSnapshot:
    def __init__(self, doc_id: str, data: dict | None, reference=None) -> None:
        self.id = doc_id
        self.reference = reference
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None

    def get(self, field: str):
        return (self._data or {}).get(field)


class FakeDocRef:
    def __init__(self, client: FakeClient, collection: str, doc_id: str) -> None:
        self._client = client
        self._collection = collection
        self.id = doc_id

    def get(self, transaction=None) -> FakeSnapshot:
        self._client.check_available()
        return FakeSnapshot(self.id, self._client.docs[self._collection].get(self.id), self)

    def write(self, data: dict) -> None:
        self._client.docs[self._collection][self.id] = dict(data)

    def remove(self) -> None:
        self._client.docs[self._collection].pop(self.id, None)


class FakeQuery:
    def __init__(self, client: FakeClient, collection: str, field_filter) -> None:
        self._client = client
        self._collection = collection
        self._filter = field_filter

    def stream(self):
        self._client.check_available()
        field, op, value = self._filter.field_path, self._filter.op_string, self._filter.value
        for doc_id, data in list(self._client.docs[self._collection].items()):
            current = data.get(field)
            if (
                (op == "==" and current == value)
                or (op == "array_contains" and value in (current or []))
                or (op == "array_contains_any" and set(value) & set(current or []))
            ):
                yield FakeSnapshot(doc_id, data, FakeDocRef(self._client, self._collection, doc_id))


class FakeCollection:
    def __init__(self, client: FakeClient, name: str) -> None:
        self._client = client
        self._name = name

    def document(self, doc_id: str | None = None) -> FakeDocRef:
        return FakeDocRef(self._client, self._name, doc_id or f"auto{next(self._client.ids)}")

    def where(self, filter) -> FakeQuery:
        return FakeQuery(self._client, self._name, filter)


class FakeTransaction:
    """Applies writes immediately; the ledger does every read before its first write."""

    def __init__(self, client: FakeClient) -> None:
        self._client = client

    def get(self, query):
        return query.stream()

    def create(self, ref: FakeDocRef, data: dict) -> None:
        assert not ref.get().exists, f"{ref.id} already exists"
        ref.write(data)

    def delete(self, ref: FakeDocRef) -> None:
        ref.remove()


class FakeBatch:
    def __init__(self, client: FakeClient) -> None:
        self._client = client
        self._writes: list[tuple[FakeDocRef, dict]] = []

    def set(self, ref: FakeDocRef, data: dict) -> None:
        self._writes.append((ref, data))

    def commit(self) -> None:
        self._client.check_available()
        for ref, data in self._writes:
            ref.write(data)


class FakeClient:
    def __init__(self) -> None:
        self.docs: dict[str, dict[str, dict]] = {"bookings": {}, "slot_locks": {}}
        self.ids = itertools.count(1)
        self.available = True

    def check_available(self) -> None:
        if not self.available:
            raise core_exceptions.ServiceUnavailable("firestore down")

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def get_all(self, refs, transaction=None):
        return [ref.get(transaction=transaction) for ref in refs]

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self)

    def batch(self) -> FakeBatch:
        return FakeBatch(self)


@pytest.fixture
def client(monkeypatch) -> FakeClient:
    # Run transaction bodies once, directly against the fake transaction
    monkeypatch.setattr(firestore_ledger, "transactional", lambda fn: fn)
    return FakeClient()


@pytest.fixture
def ledger(client: FakeClient) -> FirestoreLedger:
    return FirestoreLedger(client=client, bookings_collection="bookings", locks_collection="slot_locks")


def _booking(user_id: int, *slot_keys: str) -> Booking:
    return Booking(
        user_id=user_id,
        chat_id=user_id,
        username=f"user{user_id}",
        slots=tuple(Slot.from_key(key) for key in slot_keys),
        booked_at=datetime(2024, 5, 30, 12, 0, tzinfo=timezone.utc),
    )


def test_lock_id_uses_date_and_time():
    assert lock_id("2024-06-01 09:30") == "2024-06-01_09:30"


def test_document_shape_matches_existing_bookings_collection():
    booking = _booking(77, "2024-06-01 09:00", "2024-06-01 09:30")

    assert _to_document(booking) == {
        "username": "user77",
        "userId": 77,
        "chatId": 77,
        "selectedTimes": ["2024-06-01 09:00", "2024-06-01 09:30"],
        "bookedAt": booking.booked_at,
    }


def test_snapshot_maps_back_to_booking(ledger):
    snapshot = FakeSnapshot(
        "abc",
        {
            "username": "Ana",
            "userId": 77,
            "chatId": 700,
            "selectedTimes": ["2024-06-01 09:30", "2024-06-01 09:00"],
            "bookedAt": datetime(2024, 5, 30, tzinfo=timezone.utc),
        },
    )

    booking = ledger._from_snapshot(snapshot)

    assert booking is not None
    assert booking.id == "abc"
    assert booking.slot_keys == ["2024-06-01 09:00", "2024-06-01 09:30"]


def test_unreadable_documents_are_skipped(ledger):
    gap = FakeSnapshot("gap", {"userId": 1, "selectedTimes": ["2024-06-01 09:00", "2024-06-01 11:00"]})
    missing_owner = FakeSnapshot("anon", {"selectedTimes": ["2024-06-01 09:00"]})

    assert ledger._from_snapshot(gap) is None
    assert ledger._from_snapshot(missing_owner) is None


def test_commit_writes_booking_and_one_lock_per_slot(client, ledger):
    booking_id = ledger.commit_if_no_overlap(_booking(1, "2024-06-01 09:00", "2024-06-01 09:30"))

    assert client.docs["bookings"][booking_id]["selectedTimes"] == ["2024-06-01 09:00", "2024-06-01 09:30"]
    assert client.docs["slot_locks"] == {
        "2024-06-01_09:00": {"bookingId": booking_id, "userId": 1},
        "2024-06-01_09:30": {"bookingId": booking_id, "userId": 1},
    }
    assert [b.id for b in ledger.find_by_slot("2024-06-01 09:30")] == [booking_id]


def test_commit_over_locked_slot_conflicts_and_writes_nothing(client, ledger):
    ledger.commit_if_no_overlap(_booking(1, "2024-06-01 09:30"))

    with pytest.raises(SlotConflictError) as exc:
        ledger.commit_if_no_overlap(_booking(2, "2024-06-01 09:00", "2024-06-01 09:30"))

    assert exc.value.slot_keys == ["2024-06-01 09:30"]
    assert len(client.docs["bookings"]) == 1
    assert set(client.docs["slot_locks"]) == {"2024-06-01_09:30"}
    assert ledger.find_by_owner(2) == []


def test_commit_conflicts_with_booking_that_has_no_locks(client, ledger):
    client.docs["bookings"]["legacy"] = {"userId": 5, "selectedTimes": ["2024-06-01 09:00"]}

    with pytest.raises(SlotConflictError) as exc:
        ledger.commit_if_no_overlap(_booking(2, "2024-06-01 08:30", "2024-06-01 09:00"))

    assert exc.value.slot_keys == ["2024-06-01 09:00"]
    assert list(client.docs["bookings"]) == ["legacy"]
    assert client.docs["slot_locks"] == {}


def test_inserted_booking_holds_locks(client, ledger):
    booking_id = ledger.insert(_booking(1, "2024-06-01 20:00"))

    assert client.docs["slot_locks"]["2024-06-01_20:00"]["bookingId"] == booking_id
    with pytest.raises(SlotConflictError):
        ledger.commit_if_no_overlap(_booking(2, "2024-06-01 20:00"))


def test_delete_releases_locks_so_slots_can_be_rebooked(client, ledger):
    first = ledger.commit_if_no_overlap(_booking(1, "2024-06-01 09:00", "2024-06-01 09:30"))

    assert ledger.delete(first) is True
    assert client.docs["slot_locks"] == {}
    assert ledger.get(first) is None

    second = ledger.commit_if_no_overlap(_booking(2, "2024-06-01 09:30"))
    assert ledger.get(second).user_id == 2
    assert ledger.delete(first) is False


def test_delete_keeps_locks_held_by_another_booking(client, ledger):
    client.docs["bookings"]["legacy"] = {"userId": 5, "selectedTimes": ["2024-06-01 09:00"]}
    client.docs["slot_locks"]["2024-06-01_09:00"] = {"bookingId": "other", "userId": 6}

    assert ledger.delete("legacy") is True
    assert client.docs["slot_locks"] == {"2024-06-01_09:00": {"bookingId": "other", "userId": 6}}


def test_firestore_errors_become_ledger_unavailable(client, ledger):
    client.available = False

    with pytest.raises(LedgerUnavailableError):
        ledger.commit_if_no_overlap(_booking(1, "2024-06-01 09:00"))
    with pytest.raises(LedgerUnavailableError):
        ledger.find_by_slot("2024-06-01 09:00")
    with pytest.raises(LedgerUnavailableError):
        ledger.insert(_booking(1, "2024-06-01 09:00"))
    with pytest.raises(LedgerUnavailableError):
        ledger.delete("anything")
