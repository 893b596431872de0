from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        raise NotImplementedError


class TokenProvider(ABC):
    @abstractmethod
    def create_access_token(self, user_id: int, expires_minutes: int | None = None) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode_user_id(self, token: str) -> int:
        """Return the user id carried by a valid token, AuthError otherwise."""
        raise NotImplementedError


class Notifier(ABC):
    """Delivers a user-facing notification. The message may contain HTML."""

    @abstractmethod
    async def notify(self, user_id: int, message: str) -> None:
        raise NotImplementedError


class NotificationDispatcher(ABC):
    """Hands notifications to an independent delivery path.

    dispatch() never raises and never waits for delivery.
    """

    @abstractmethod
    def dispatch(self, user_id: int, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def drain(self) -> None:
        """Wait for every dispatched notification to finish."""
        raise NotImplementedError
