from __future__ import annotations

import html
import logging
import math
from typing import Optional

from ...core.domain.models import DirectMessageLog
from ...core.domain.values import RangeRequestWithUserId
from ...core.errors import ConflictError, StorageError
from ...core.ports.repositories import LogRepository, MembershipRepository, RoomRepository, UnitOfWork, UserRepository
from ...core.ports.services import Clock, NotificationDispatcher

logger = logging.getLogger(__name__)

DEFAULT_LINK_PREFIX = "/home/direct-message/"


def new_message_notification(sender_id: int, sender_name: str, link_prefix: str = DEFAULT_LINK_PREFIX) -> str:
    return f'New Message from <a href="{link_prefix}{sender_id}">{html.escape(sender_name)}</a>'


class AppendLog:
    """Append a message to a room and notify the other member.

    Returns the new log id, or None when the content is empty, the author is
    not a member, or the write was rolled back. The room watermark is only
    ever moved down to the new id, never up.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        logs: LogRepository,
        rooms: RoomRepository,
        memberships: MembershipRepository,
        users: UserRepository,
        dispatcher: NotificationDispatcher,
        clock: Clock,
        link_prefix: str = DEFAULT_LINK_PREFIX,
    ) -> None:
        self.uow = uow
        self.logs = logs
        self.rooms = rooms
        self.memberships = memberships
        self.users = users
        self.dispatcher = dispatcher
        self.clock = clock
        self.link_prefix = link_prefix

    async def execute(self, requester_id: int, room_id: int, content: str) -> Optional[int]:
        if not content:
            return None
        if not await self.memberships.is_member(requester_id, room_id):
            return None
        now = math.ceil(self.clock.now().timestamp())
        try:
            async with self.uow.transaction():
                log_id = await self.logs.add(room_id, requester_id, content, now)
                await self.rooms.apply_watermark(room_id, log_id)
        except (ConflictError, StorageError):
            return None
        await self._notify_counterpart(requester_id, room_id)
        return log_id

    async def _notify_counterpart(self, requester_id: int, room_id: int) -> None:
        # the message is committed; nothing from here on may fail the append
        try:
            counterpart_id = await self.memberships.get_counterpart_id(requester_id, room_id)
            if counterpart_id is None:
                return
            name = await self.users.get_display_name(requester_id) or str(requester_id)
            self.dispatcher.dispatch(counterpart_id, new_message_notification(requester_id, name, self.link_prefix))
        except Exception:
            logger.exception("could not schedule notification for room %s", room_id)


class ListLogs:
    def __init__(self, logs: LogRepository, memberships: MembershipRepository) -> None:
        self.logs = logs
        self.memberships = memberships

    async def execute(self, room_id: int, request: RangeRequestWithUserId) -> list[DirectMessageLog]:
        hide_log_id = await self.memberships.get_hide_log_id(request.user_id, room_id)
        return await self.logs.list(room_id, hide_log_id, request)


class SetHideCursor:
    def __init__(self, memberships: MembershipRepository) -> None:
        self.memberships = memberships

    async def execute(self, user_id: int, room_id: int, log_id: int) -> None:
        await self.memberships.set_hide_log_id(user_id, room_id, log_id)


class ToggleLike:
    def __init__(self, logs: LogRepository) -> None:
        self.logs = logs

    async def execute(self, log_id: int, liked: bool) -> None:
        await self.logs.set_liked(log_id, liked)


class GetLog:
    def __init__(self, logs: LogRepository) -> None:
        self.logs = logs

    async def execute(self, log_id: int) -> Optional[DirectMessageLog]:
        return await self.logs.get(log_id)
