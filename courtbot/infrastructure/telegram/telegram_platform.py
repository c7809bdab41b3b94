from __future__ import annotations

from typing import Any

from courtbot.application.ports.message_platform import MessagePlatformPort
from courtbot.domain.entities.reply import Reply
from courtbot.infrastructure.telegram.telegram_client import TelegramClient


def to_inline_keyboard(reply: Reply) -> dict[str, Any] | None:
    if not reply.keyboard:
        return None
    return {
        "inline_keyboard": [
            [{"text": button.text, "callback_data": button.callback_data} for button in row]
            for row in reply.keyboard
        ]
    }


class TelegramPlatform(MessagePlatformPort):
    def __init__(self, client: TelegramClient) -> None:
        self._client = client

    def send_message(self, chat_id: int, reply: Reply) -> int:
        result = self._client.send_message(chat_id, reply.text, to_inline_keyboard(reply))
        return int(result["message_id"])

    def edit_message(self, chat_id: int, message_id: int, reply: Reply) -> None:
        self._client.edit_message_text(chat_id, message_id, reply.text, to_inline_keyboard(reply))

    def answer_callback(self, callback_id: str, text: str | None = None, show_alert: bool = False) -> None:
        self._client.answer_callback_query(callback_id, text=text, show_alert=show_alert)
