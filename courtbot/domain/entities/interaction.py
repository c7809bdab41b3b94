from dataclasses import dataclass

from courtbot.domain.entities.intent import Intent


@dataclass(frozen=True)
class Interaction:
    update_id: int
    chat_id: int
    user_id: int | None
    first_name: str | None
    intent: Intent | None  # None when a callback token could not be decoded
    callback_id: str | None = None
    message_id: int | None = None
