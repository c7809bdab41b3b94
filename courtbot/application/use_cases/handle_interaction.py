from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from courtbot.application.exceptions import (
    BookingNotFoundError,
    EmptySelectionError,
    LedgerUnavailableError,
    NonContiguousSelectionError,
    NotBookingOwnerError,
    PlatformError,
    SlotConflictError,
)
from courtbot.application.ports.message_platform import MessagePlatformPort
from courtbot.application.ports.session_store import SessionStorePort, session_key
from courtbot.application.use_cases import reply_composer as texts
from courtbot.application.use_cases.booking import BookingUseCase, BookingUser
from courtbot.application.use_cases.page_window import PageWindow
from courtbot.application.use_cases.reply_composer import ReplyComposer
from courtbot.application.use_cases.selection import SelectionUseCase
from courtbot.application.utils.slot_grid import upcoming_dates
from courtbot.domain.entities.intent import (
    CancelBooking,
    ChangePage,
    CheckAvailability,
    ChooseDate,
    ConfirmBooking,
    ListBookings,
    SlotTaken,
    Start,
    ToggleTime,
)
from courtbot.domain.entities.interaction import Interaction


@dataclass
class CallbackAnswer:
    text: str | None = None
    show_alert: bool = False


class HandleInteractionUseCase:
    """
    Runs one inbound interaction to completion.

    Every failure is contained per conversation: rejections and ledger errors
    become chat messages, anything else is logged.
    """

    def __init__(
        self,
        store: SessionStorePort,
        platform: MessagePlatformPort,
        selection: SelectionUseCase,
        booking: BookingUseCase,
        page_window: PageWindow,
        composer: ReplyComposer,
        timezone: ZoneInfo,
    ) -> None:
        self._store = store
        self._platform = platform
        self._selection = selection
        self._booking = booking
        self._page_window = page_window
        self._composer = composer
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    def handle(self, interaction: Interaction) -> None:
        if self._store.has_processed(interaction.update_id):
            self._logger.info("Duplicate update ignored", extra={"chat_id": interaction.chat_id})
            return
        self._store.mark_processed(interaction.update_id)

        answer = CallbackAnswer()
        intent_name = type(interaction.intent).__name__ if interaction.intent else None
        key = session_key(interaction.chat_id, interaction.user_id)
        try:
            self._logger.info(
                "Interaction received",
                extra={"chat_id": interaction.chat_id, "user_id": interaction.user_id, "intent": intent_name},
            )
            # One interaction per conversation at a time; other conversations run in parallel
            with self._store.lock_for(key):
                answer = self._dispatch(interaction, key)
        except LedgerUnavailableError as e:
            self._logger.error("Ledger unavailable", extra={"chat_id": interaction.chat_id, "reason": str(e)})
            self._send_text(interaction.chat_id, texts.GENERIC_FAILURE_TEXT)
        except PlatformError as e:
            self._logger.error("Platform call failed", extra={"chat_id": interaction.chat_id, "reason": str(e)})
        except Exception:
            self._logger.exception(
                "Unhandled error while handling interaction",
                extra={"chat_id": interaction.chat_id, "intent": intent_name},
            )
        finally:
            if interaction.callback_id:
                try:
                    self._platform.answer_callback(interaction.callback_id, answer.text, answer.show_alert)
                except PlatformError as e:
                    self._logger.warning("Callback answer failed", extra={"reason": str(e)})

    def _dispatch(self, interaction: Interaction, key: str) -> CallbackAnswer:
        intent = interaction.intent
        chat_id = interaction.chat_id

        if intent is None:
            return CallbackAnswer()

        if isinstance(intent, Start):
            self._platform.send_message(chat_id, self._composer.main_menu(interaction.first_name))
        elif isinstance(intent, CheckAvailability):
            self._platform.send_message(chat_id, self._composer.date_menu(upcoming_dates(self._today())))
        elif isinstance(intent, ChooseDate):
            self._present_slots(chat_id, key, intent.day, 0)
        elif isinstance(intent, ChangePage):
            self._present_slots(chat_id, key, intent.day, intent.page, message_id=interaction.message_id)
        elif isinstance(intent, ToggleTime):
            self._toggle(interaction, key, intent)
        elif isinstance(intent, ConfirmBooking):
            self._confirm(interaction, key)
        elif isinstance(intent, ListBookings):
            self._list_bookings(interaction)
        elif isinstance(intent, CancelBooking):
            self._cancel(interaction, intent.booking_id)
        elif isinstance(intent, SlotTaken):
            return CallbackAnswer(text=texts.SLOT_TAKEN_TEXT)
        else:
            raise TypeError(f"Unhandled intent {intent!r}")
        return CallbackAnswer()

    def _present_slots(
        self,
        chat_id: int,
        key: str,
        day: date,
        page_index: int,
        message_id: int | None = None,
    ) -> None:
        """Render the slot grid, editing message_id in place when given, else sending a new message."""
        page = self._page_window.page(day, self._selection.get(key), page_index)
        reply = self._composer.slot_grid(page)

        if message_id is not None:
            try:
                self._platform.edit_message(chat_id, message_id, reply)
            except PlatformError as e:
                # e.g. message too old to edit; fall back to a fresh grid
                self._logger.warning("Grid edit failed, sending new grid", extra={"chat_id": chat_id, "reason": str(e)})
                message_id = None

        if message_id is None:
            message_id = self._platform.send_message(chat_id, reply)

        self._selection.remember_message(key, message_id, day, page.page_index)

    def _toggle(self, interaction: Interaction, key: str, intent: ToggleTime) -> None:
        slot = intent.slot
        page_index = self._page_window.page_of(slot)
        if page_index is None:
            self._logger.warning("Toggle outside the slot grid ignored", extra={"slot": slot.key})
            return

        try:
            state = self._selection.toggle(key, slot)
        except NonContiguousSelectionError:
            self._logger.info("Toggle rejected", extra={"slot": slot.key, "reason": "non_contiguous"})
            self._send_text(interaction.chat_id, texts.NON_CONTIGUOUS_TEXT)
            return
        self._logger.info(
            "Selection toggled",
            extra={"chat_id": interaction.chat_id, "user_id": interaction.user_id, "slot": slot.key},
        )

        target = interaction.message_id if interaction.message_id is not None else state.message_id
        self._present_slots(interaction.chat_id, key, slot.day, page_index, message_id=target)

    def _confirm(self, interaction: Interaction, key: str) -> None:
        chat_id = interaction.chat_id
        if interaction.user_id is None:
            self._send_text(chat_id, texts.UNKNOWN_USER_TEXT)
            return

        user = BookingUser(user_id=interaction.user_id, chat_id=chat_id, username=interaction.first_name)
        try:
            booking = self._booking.confirm(key, user)
        except EmptySelectionError:
            self._send_text(chat_id, texts.EMPTY_SELECTION_TEXT)
            return
        except NonContiguousSelectionError:
            self._send_text(chat_id, texts.NON_CONTIGUOUS_TEXT)
            return
        except SlotConflictError as e:
            self._platform.send_message(chat_id, self._composer.booking_conflict(e.slot_keys))
            self._refresh_grid(chat_id, key)
            return
        except LedgerUnavailableError as e:
            self._logger.error("Booking write failed", extra={"chat_id": chat_id, "reason": str(e)})
            self._send_text(chat_id, texts.CONFIRM_FAILED_TEXT)
            return

        self._platform.send_message(chat_id, self._composer.booking_confirmed(booking))
        self._refresh_grid(chat_id, key)

    def _refresh_grid(self, chat_id: int, key: str) -> None:
        state = self._selection.get(key)
        if state.message_id is None or state.message_date is None:
            return
        self._present_slots(chat_id, key, state.message_date, state.message_page, message_id=state.message_id)

    def _list_bookings(self, interaction: Interaction) -> None:
        chat_id = interaction.chat_id
        if interaction.user_id is None:
            self._send_text(chat_id, texts.UNKNOWN_USER_TEXT)
            return

        bookings = self._booking.list_for(interaction.user_id)
        if not bookings:
            self._send_text(chat_id, texts.NO_BOOKINGS_TEXT)
            return
        for booking in bookings:
            self._platform.send_message(chat_id, self._composer.booking_entry(booking))

    def _cancel(self, interaction: Interaction, booking_id: str) -> None:
        chat_id = interaction.chat_id
        if interaction.user_id is None:
            self._send_text(chat_id, texts.UNKNOWN_USER_TEXT)
            return

        try:
            self._booking.cancel(booking_id, interaction.user_id)
        except BookingNotFoundError:
            self._send_text(chat_id, texts.CANCEL_MISSING_TEXT)
            return
        except NotBookingOwnerError:
            self._send_text(chat_id, texts.CANCEL_NOT_OWNER_TEXT)
            return
        except LedgerUnavailableError as e:
            self._logger.error("Booking cancel failed", extra={"booking_id": booking_id, "reason": str(e)})
            self._send_text(chat_id, texts.CANCEL_FAILED_TEXT)
            return

        self._send_text(chat_id, texts.CANCELLED_TEXT)

    def _send_text(self, chat_id: int, text: str) -> None:
        self._platform.send_message(chat_id, self._composer.text(text))

    def _today(self) -> date:
        return datetime.now(self._timezone).date()
