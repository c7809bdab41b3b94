from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Callable

from courtbot.domain.entities.selection_state import SelectionState


def session_key(chat_id: int, user_id: int | None) -> str:
    return f"{chat_id}:{user_id if user_id is not None else chat_id}"


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, key: str) -> SelectionState:
        """Return the draft for key, creating an empty one on first access."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, state: SelectionState) -> None:
        raise NotImplementedError

    @abstractmethod
    def update(self, key: str, fn: Callable[[SelectionState], SelectionState]) -> SelectionState:
        """
        Replace the draft for key with fn(draft) while holding the lock for key.
        If fn raises, the stored draft is left as it was.
        """
        raise NotImplementedError

    @abstractmethod
    def lock_for(self, key: str) -> AbstractContextManager:
        """Re-entrant lock serializing every interaction of one conversation."""
        raise NotImplementedError

    @abstractmethod
    def clear(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def has_processed(self, update_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mark_processed(self, update_id: int) -> None:
        raise NotImplementedError
