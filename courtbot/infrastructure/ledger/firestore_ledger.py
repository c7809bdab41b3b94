"""
Firestore-backed booking ledger.

Bookings live in the ``bookings`` collection with the fields ``username``,
``userId``, ``chatId``, ``selectedTimes`` (slot keys) and ``bookedAt``.

Overlap protection uses one lock document per slot in ``slot_locks`` whose ID
is ``"{YYYY-MM-DD}_{HH:MM}"``. A commit reads every lock of its slots inside a
transaction and creates them together with the booking, so two transactions
racing for the same slot cannot both succeed. Firestore retries the
transaction on contention; the loser then sees the winner's locks.

Booking documents written without locks (older bot versions) are caught by an
``array_contains_any`` query on ``selectedTimes`` run in the same transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from google.cloud import exceptions as gexc
from google.cloud import firestore
from google.cloud.firestore import transactional
from google.cloud.firestore_v1.base_query import FieldFilter

from courtbot.application.exceptions import LedgerUnavailableError, SlotConflictError
from courtbot.application.ports.ledger import LedgerPort
from courtbot.core.config import settings
from courtbot.domain.entities.booking import Booking
from courtbot.domain.entities.slot import Slot


# Firestore caps the value list of an array_contains_any filter
ARRAY_CONTAINS_ANY_LIMIT = 30


def lock_id(slot_key: str) -> str:
    return slot_key.replace(" ", "_")


def slot_key_of_lock(doc_id: str) -> str:
    return doc_id.replace("_", " ")


class FirestoreLedger(LedgerPort):
    def __init__(
        self,
        client: firestore.Client | None = None,
        project_id: str | None = None,
        bookings_collection: str | None = None,
        locks_collection: str | None = None,
    ) -> None:
        # Credentials come from ADC (GOOGLE_APPLICATION_CREDENTIALS or the runtime's service account)
        self._db = client or firestore.Client(project=project_id or settings.FIRESTORE_PROJECT_ID)
        self._bookings = self._db.collection(bookings_collection or settings.FIRESTORE_BOOKINGS_COLLECTION)
        self._locks = self._db.collection(locks_collection or settings.FIRESTORE_LOCKS_COLLECTION)
        self._logger = logging.getLogger(__name__)

    def insert(self, booking: Booking) -> str:
        """Write booking and its slot locks in one batch, overwriting any existing locks."""
        booking_ref = self._bookings.document()
        batch = self._db.batch()
        for key in booking.slot_keys:
            batch.set(self._locks.document(lock_id(key)), _lock_document(booking_ref.id, booking))
        batch.set(booking_ref, _to_document(booking))
        try:
            batch.commit()
        except gexc.GoogleCloudError as err:
            raise LedgerUnavailableError(f"Firestore error: {err}") from err
        return booking_ref.id

    def commit_if_no_overlap(self, booking: Booking) -> str:
        booking_ref = self._bookings.document()
        wanted = set(booking.slot_keys)
        lock_refs = [self._locks.document(lock_id(key)) for key in booking.slot_keys]
        booking_queries = [
            self._bookings.where(filter=FieldFilter("selectedTimes", "array_contains_any", chunk))
            for chunk in _chunks(booking.slot_keys, ARRAY_CONTAINS_ANY_LIMIT)
        ]
        document = _to_document(booking)

        @transactional
        def _txn(transaction):
            # Firestore transactions need every read done before the first write
            snapshots = self._db.get_all(lock_refs, transaction=transaction)
            taken = {slot_key_of_lock(snap.id) for snap in snapshots if snap.exists}
            for query in booking_queries:
                for snap in transaction.get(query):
                    taken.update(wanted.intersection((snap.to_dict() or {}).get("selectedTimes") or []))
            if taken:
                raise SlotConflictError(sorted(taken))
            for ref in lock_refs:
                transaction.create(ref, _lock_document(booking_ref.id, booking))
            transaction.create(booking_ref, document)

        try:
            _txn(self._db.transaction())
        except gexc.GoogleCloudError as err:  # network / perms
            raise LedgerUnavailableError(f"Firestore error: {err}") from err

        self._logger.info(
            "Firestore booking committed",
            extra={"booking_id": booking_ref.id, "user_id": booking.user_id, "slot": str(booking)},
        )
        return booking_ref.id

    def get(self, booking_id: str) -> Booking | None:
        try:
            snapshot = self._bookings.document(booking_id).get()
        except gexc.GoogleCloudError as err:
            raise LedgerUnavailableError(f"Firestore error: {err}") from err
        if not snapshot.exists:
            return None
        return self._from_snapshot(snapshot)

    def delete(self, booking_id: str) -> bool:
        booking_ref = self._bookings.document(booking_id)

        @transactional
        def _txn(transaction) -> bool:
            snapshot = booking_ref.get(transaction=transaction)
            if not snapshot.exists:
                return False
            lock_refs = [self._locks.document(lock_id(key)) for key in snapshot.get("selectedTimes") or []]
            # Firestore transactions need every read done before the first write
            locks = list(self._db.get_all(lock_refs, transaction=transaction)) if lock_refs else []
            for lock in locks:
                # Only release locks this booking holds
                if lock.exists and lock.get("bookingId") == booking_id:
                    transaction.delete(lock.reference)
            transaction.delete(booking_ref)
            return True

        try:
            return _txn(self._db.transaction())
        except gexc.GoogleCloudError as err:
            raise LedgerUnavailableError(f"Firestore error: {err}") from err

    def find_by_owner(self, user_id: int) -> list[Booking]:
        query = self._bookings.where(filter=FieldFilter("userId", "==", user_id))
        return self._run(query)

    def find_by_slot(self, slot_key: str) -> list[Booking]:
        query = self._bookings.where(filter=FieldFilter("selectedTimes", "array_contains", slot_key))
        return self._run(query)

    def _run(self, query) -> list[Booking]:
        try:
            snapshots = list(query.stream())
        except gexc.GoogleCloudError as err:
            raise LedgerUnavailableError(f"Firestore error: {err}") from err
        bookings = []
        for snapshot in snapshots:
            booking = self._from_snapshot(snapshot)
            if booking is not None:
                bookings.append(booking)
        return bookings

    def _from_snapshot(self, snapshot) -> Booking | None:
        data = snapshot.to_dict() or {}
        try:
            return Booking(
                id=snapshot.id,
                user_id=int(data["userId"]),
                chat_id=int(data.get("chatId") or data["userId"]),
                username=data.get("username"),
                slots=tuple(Slot.from_key(key) for key in data.get("selectedTimes") or []),
                booked_at=data.get("bookedAt") or datetime.now(timezone.utc),
            )
        except (KeyError, ValueError) as e:
            self._logger.warning(
                "Skipping unreadable booking document",
                extra={"booking_id": snapshot.id, "reason": str(e)},
            )
            return None


def _to_document(booking: Booking) -> dict:
    return {
        "username": booking.username,
        "userId": booking.user_id,
        "chatId": booking.chat_id,
        "selectedTimes": booking.slot_keys,
        "bookedAt": booking.booked_at,
    }


def _lock_document(booking_id: str, booking: Booking) -> dict:
    return {"bookingId": booking_id, "userId": booking.user_id}


def _chunks(items: list[str], size: int) -> list[list[str]]:
    return [items[i : i + size] for i in range(0, len(items), size)]
