from abc import ABC, abstractmethod

from courtbot.domain.entities.reply import Reply


class MessagePlatformPort(ABC):
    @abstractmethod
    def send_message(self, chat_id: int, reply: Reply) -> int:
        """Send reply with its keyboard. Returns the sent message id."""
        raise NotImplementedError

    @abstractmethod
    def edit_message(self, chat_id: int, message_id: int, reply: Reply) -> None:
        raise NotImplementedError

    @abstractmethod
    def answer_callback(self, callback_id: str, text: str | None = None, show_alert: bool = False) -> None:
        raise NotImplementedError
