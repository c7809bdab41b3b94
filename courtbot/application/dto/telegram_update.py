from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from courtbot.application.utils.callback_data import decode_intent
from courtbot.domain.entities.intent import Start
from courtbot.domain.entities.interaction import Interaction


class TelegramUpdateDTO(BaseModel):
    update_id: int
    message: dict[str, Any] | None = None
    callback_query: dict[str, Any] | None = Field(default=None)

    def extract_interaction(self) -> Interaction | None:
        """Map a Telegram update to an Interaction. Returns None for updates the bot ignores."""
        if self.callback_query:
            query = self.callback_query
            message = query.get("message") or {}
            chat_id = (message.get("chat") or {}).get("id")
            sender = query.get("from") or {}
            if chat_id is None or not query.get("id"):
                return None
            return Interaction(
                update_id=self.update_id,
                chat_id=int(chat_id),
                user_id=sender.get("id"),
                first_name=sender.get("first_name"),
                intent=decode_intent(query.get("data")),
                callback_id=str(query["id"]),
                message_id=message.get("message_id"),
            )

        if self.message:
            chat = self.message.get("chat") or {}
            sender = self.message.get("from") or {}
            if chat.get("id") is None:
                return None
            return Interaction(
                update_id=self.update_id,
                chat_id=int(chat["id"]),
                user_id=sender.get("id"),
                first_name=chat.get("first_name") or sender.get("first_name"),
                intent=Start(),
                message_id=self.message.get("message_id"),
            )

        return None
