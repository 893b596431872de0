from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from ....core.domain.models import RoomSummary
from ....core.domain.values import NO_LOG_ID, RangeRequestWithUserId
from ....core.ports.repositories import MembershipRepository
from ..models import DirectMessageLogs, DirectMessageRoomMemberships, UserRelationships, Users
from ..range_query import apply_range

logger = logging.getLogger(__name__)


class PgMembershipRepository(MembershipRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def is_member(self, user_id: int, room_id: int) -> bool:  # type: ignore[override]
        stmt = select(
            exists().where(
                DirectMessageRoomMemberships.room_id == room_id,
                DirectMessageRoomMemberships.user_id == user_id,
            )
        )
        return bool((await self.session.execute(stmt)).scalar())

    async def get_hide_log_id(self, user_id: int, room_id: int) -> int:  # type: ignore[override]
        stmt = select(DirectMessageRoomMemberships.hide_log_id).where(
            DirectMessageRoomMemberships.room_id == room_id,
            DirectMessageRoomMemberships.user_id == user_id,
        )
        value = (await self.session.execute(stmt)).scalar_one_or_none()
        return NO_LOG_ID if value is None else value

    async def set_hide_log_id(self, user_id: int, room_id: int, log_id: int) -> None:  # type: ignore[override]
        # plain overwrite; callers pass increasing values
        await self.session.execute(
            update(DirectMessageRoomMemberships)
            .where(
                DirectMessageRoomMemberships.room_id == room_id,
                DirectMessageRoomMemberships.user_id == user_id,
            )
            .values(hide_log_id=log_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()

    async def get_counterpart_id(self, user_id: int, room_id: int) -> Optional[int]:  # type: ignore[override]
        stmt = (
            select(DirectMessageRoomMemberships.user_id)
            .where(
                DirectMessageRoomMemberships.room_id == room_id,
                DirectMessageRoomMemberships.user_id != user_id,
            )
            .order_by(DirectMessageRoomMemberships.user_id)
            .limit(1)
        )
        counterpart = (await self.session.execute(stmt)).scalar_one_or_none()
        if counterpart is None:
            logger.warning("room %s has no counterpart for user %s", room_id, user_id)
        return counterpart

    async def list_rooms(self, request: RangeRequestWithUserId) -> list[RoomSummary]:  # type: ignore[override]
        requester_id = request.user_id
        blocked_by_requester = select(UserRelationships.to_id).where(
            UserRelationships.from_id == requester_id,
            UserRelationships.relationship < 0,
        )
        blocking_requester = select(UserRelationships.from_id).where(
            UserRelationships.to_id == requester_id,
            UserRelationships.relationship < 0,
        )
        a = aliased(DirectMessageRoomMemberships)
        b = aliased(DirectMessageRoomMemberships)
        # inner join on logs drops empty rooms; grouping keeps one row per room
        stmt = (
            select(
                a.room_id.label("room_id"),
                b.user_id.label("counterpart_id"),
                Users.display_name.label("counterpart_name"),
                func.max(DirectMessageLogs.id).label("last_log_id"),
                a.hide_log_id.label("hide_log_id"),
            )
            .join(b, a.room_id == b.room_id)
            .join(Users, Users.id == b.user_id)
            .join(DirectMessageLogs, DirectMessageLogs.room_id == b.room_id)
            .where(
                a.user_id == requester_id,
                b.user_id != requester_id,
                b.user_id.not_in(blocked_by_requester),
                b.user_id.not_in(blocking_requester),
            )
            .group_by(a.room_id, b.user_id, Users.display_name, a.hide_log_id)
        )
        stmt = apply_range(request, stmt, a.room_id, "room_id")
        rows = (await self.session.execute(stmt)).mappings().all()
        return [
            RoomSummary(
                room_id=r["room_id"],
                counterpart_id=r["counterpart_id"],
                counterpart_name=r["counterpart_name"],
                last_log_id=r["last_log_id"],
                hide_log_id=r["hide_log_id"],
            )
            for r in rows
        ]
