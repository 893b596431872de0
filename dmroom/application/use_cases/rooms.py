from __future__ import annotations

import logging
from typing import Optional

from ...core.domain.models import DirectMessageRoom, RoomSummary
from ...core.domain.values import NO_LOG_ID, RangeRequestWithUserId
from ...core.errors import ConflictError, StorageError
from ...core.ports.repositories import LogRepository, MembershipRepository, RoomRepository, UnitOfWork

logger = logging.getLogger(__name__)


class ResolveRoom:
    def __init__(self, rooms: RoomRepository) -> None:
        self.rooms = rooms

    async def execute(self, requester_id: int, counterpart_id: int) -> Optional[int]:
        if requester_id == counterpart_id:
            return None
        return await self.rooms.find_by_pair(requester_id, counterpart_id)


class EnsureRoom:
    """Return the room of a user pair, creating it on first contact.

    A new room starts with the newest log id in the whole store as its
    watermark (-1 when there are no logs at all). Two first-contact requests
    racing each other hit the unique pair key; the loser re-reads the winner's room.
    """

    def __init__(self, uow: UnitOfWork, rooms: RoomRepository, logs: LogRepository) -> None:
        self.uow = uow
        self.rooms = rooms
        self.logs = logs

    async def execute(self, requester_id: int, counterpart_id: int) -> Optional[DirectMessageRoom]:
        if requester_id == counterpart_id:
            return None
        found = await self.rooms.find_by_pair(requester_id, counterpart_id)
        if found is not None:
            return await self.rooms.get(found)
        try:
            async with self.uow.transaction():
                newest_log_id = await self.logs.newest_id()
                room = await self.rooms.add(
                    requester_id,
                    counterpart_id,
                    NO_LOG_ID if newest_log_id is None else newest_log_id,
                )
        except ConflictError:
            found = await self.rooms.find_by_pair(requester_id, counterpart_id)
            if found is None:
                return None
            return await self.rooms.get(found)
        except StorageError:
            return None
        logger.info("created direct message room %s for users %s/%s", room.id, requester_id, counterpart_id)
        return room


class GetRoom:
    def __init__(self, rooms: RoomRepository) -> None:
        self.rooms = rooms

    async def execute(self, room_id: int) -> Optional[DirectMessageRoom]:
        return await self.rooms.get(room_id)


class DeleteRoom:
    def __init__(self, uow: UnitOfWork, rooms: RoomRepository) -> None:
        self.uow = uow
        self.rooms = rooms

    async def execute(self, room_id: int) -> bool:
        try:
            async with self.uow.transaction():
                await self.rooms.delete(room_id)
        except (ConflictError, StorageError):
            return False
        logger.info("deleted direct message room %s", room_id)
        return True


class ListRooms:
    def __init__(self, memberships: MembershipRepository) -> None:
        self.memberships = memberships

    async def execute(self, request: RangeRequestWithUserId) -> list[RoomSummary]:
        return await self.memberships.list_rooms(request)


class GetCounterpart:
    def __init__(self, memberships: MembershipRepository) -> None:
        self.memberships = memberships

    async def execute(self, requester_id: int, room_id: int) -> Optional[int]:
        return await self.memberships.get_counterpart_id(requester_id, room_id)


class IsMember:
    def __init__(self, memberships: MembershipRepository) -> None:
        self.memberships = memberships

    async def execute(self, user_id: int, room_id: int) -> bool:
        return await self.memberships.is_member(user_id, room_id)
