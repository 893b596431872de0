from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional

from ..domain.models import DirectMessageLog, DirectMessageRoom, RoomSummary, User
from ..domain.values import RangeRequest, RangeRequestWithUserId


class UnitOfWork(ABC):
    @abstractmethod
    def transaction(self) -> AsyncContextManager[None]:
        """Atomic scope: commit on success, roll back and raise a domain error otherwise.

        ConflictError for uniqueness violations, StorageError for anything else
        the storage engine rejects.
        """
        raise NotImplementedError


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def get_display_name(self, user_id: int) -> Optional[str]:
        raise NotImplementedError


class RoomRepository(ABC):
    @abstractmethod
    async def get(self, room_id: int) -> Optional[DirectMessageRoom]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_pair(self, user_a: int, user_b: int) -> Optional[int]:
        """Return the room id for an unordered pair of users."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, user_a: int, user_b: int, start_inclusive_log_id: int) -> DirectMessageRoom:
        """Insert the room and both memberships. Must run inside a transaction."""
        raise NotImplementedError

    @abstractmethod
    async def apply_watermark(self, room_id: int, log_id: int) -> bool:
        """Set the watermark to log_id only if it is unset or greater. Returns True when updated."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, room_id: int) -> None:
        """Remove logs, memberships and the room. Must run inside a transaction."""
        raise NotImplementedError


class MembershipRepository(ABC):
    @abstractmethod
    async def is_member(self, user_id: int, room_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def get_hide_log_id(self, user_id: int, room_id: int) -> int:
        raise NotImplementedError

    @abstractmethod
    async def set_hide_log_id(self, user_id: int, room_id: int, log_id: int) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_counterpart_id(self, user_id: int, room_id: int) -> Optional[int]:
        raise NotImplementedError

    @abstractmethod
    async def list_rooms(self, request: RangeRequestWithUserId) -> list[RoomSummary]:
        """Rooms of request.user_id with at least one log, excluding blocked counterparts."""
        raise NotImplementedError


class LogRepository(ABC):
    @abstractmethod
    async def add(self, room_id: int, member_id: int, content: str, date: int, is_html: bool = False) -> int:
        """Insert a log and return its storage-assigned id. Must run inside a transaction."""
        raise NotImplementedError

    @abstractmethod
    async def newest_id(self) -> Optional[int]:
        """Highest log id across all rooms."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, log_id: int) -> Optional[DirectMessageLog]:
        raise NotImplementedError

    @abstractmethod
    async def list(self, room_id: int, hide_log_id: int, request: RangeRequest) -> list[DirectMessageLog]:
        raise NotImplementedError

    @abstractmethod
    async def set_liked(self, log_id: int, is_liked: bool) -> None:
        raise NotImplementedError
