from __future__ import annotations

import itertools
import logging

from courtbot.application.ports.message_platform import MessagePlatformPort
from courtbot.domain.entities.reply import Reply


class MockTelegramPlatform(MessagePlatformPort):
    """Logs outbound traffic instead of calling Telegram and keeps it for inspection."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._ids = itertools.count(1)
        self.sent: list[tuple[int, Reply]] = []
        self.edited: list[tuple[int, int, Reply]] = []
        self.answers: list[tuple[str, str | None, bool]] = []

    def send_message(self, chat_id: int, reply: Reply) -> int:
        message_id = next(self._ids)
        self.sent.append((chat_id, reply))
        self._logger.info(
            "Mock send to Telegram",
            extra={"chat_id": chat_id, "reply_text": reply.text, "message_id": message_id},
        )
        return message_id

    def edit_message(self, chat_id: int, message_id: int, reply: Reply) -> None:
        self.edited.append((chat_id, message_id, reply))
        self._logger.info(
            "Mock edit on Telegram",
            extra={"chat_id": chat_id, "reply_text": reply.text, "message_id": message_id},
        )

    def answer_callback(self, callback_id: str, text: str | None = None, show_alert: bool = False) -> None:
        self.answers.append((callback_id, text, show_alert))
        if text:
            self._logger.info("Mock callback answer", extra={"reply_text": text})
