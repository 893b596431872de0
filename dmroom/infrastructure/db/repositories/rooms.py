from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ....core.domain.models import DirectMessageRoom, order_pair
from ....core.domain.values import NO_LOG_ID
from ....core.ports.repositories import RoomRepository
from ..models import DirectMessageLogs, DirectMessageRoomMemberships, DirectMessageRooms


class PgRoomRepository(RoomRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, room_id: int) -> Optional[DirectMessageRoom]:  # type: ignore[override]
        stmt = select(DirectMessageRooms.id, DirectMessageRooms.start_inclusive_log_id).where(DirectMessageRooms.id == room_id)
        row = (await self.session.execute(stmt)).first()
        if not row:
            return None
        return DirectMessageRoom(id=row.id, start_inclusive_log_id=row.start_inclusive_log_id)

    async def find_by_pair(self, user_a: int, user_b: int) -> Optional[int]:  # type: ignore[override]
        low, high = order_pair(user_a, user_b)
        stmt = select(DirectMessageRooms.id).where(
            DirectMessageRooms.user_low_id == low,
            DirectMessageRooms.user_high_id == high,
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def add(self, user_a: int, user_b: int, start_inclusive_log_id: int) -> DirectMessageRoom:  # type: ignore[override]
        low, high = order_pair(user_a, user_b)
        row = DirectMessageRooms(start_inclusive_log_id=start_inclusive_log_id, user_low_id=low, user_high_id=high)
        self.session.add(row)
        await self.session.flush()
        self.session.add_all([
            DirectMessageRoomMemberships(room_id=row.id, user_id=user_a, hide_log_id=NO_LOG_ID),
            DirectMessageRoomMemberships(room_id=row.id, user_id=user_b, hide_log_id=NO_LOG_ID),
        ])
        await self.session.flush()
        return DirectMessageRoom(id=row.id, start_inclusive_log_id=row.start_inclusive_log_id)

    async def apply_watermark(self, room_id: int, log_id: int) -> bool:  # type: ignore[override]
        # single conditional UPDATE: the storage engine evaluates the guard per row,
        # so concurrent appends can only ever lower an existing watermark
        stmt = (
            update(DirectMessageRooms)
            .where(
                DirectMessageRooms.id == room_id,
                or_(
                    DirectMessageRooms.start_inclusive_log_id == NO_LOG_ID,
                    DirectMessageRooms.start_inclusive_log_id > log_id,
                ),
            )
            .values(start_inclusive_log_id=log_id)
            .execution_options(synchronize_session=False)
        )
        res = await self.session.execute(stmt)
        return res.rowcount > 0

    async def delete(self, room_id: int) -> None:  # type: ignore[override]
        # children first: works without declared ON DELETE CASCADE
        await self.session.execute(
            delete(DirectMessageLogs).where(DirectMessageLogs.room_id == room_id).execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(DirectMessageRoomMemberships).where(DirectMessageRoomMemberships.room_id == room_id).execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(DirectMessageRooms).where(DirectMessageRooms.id == room_id).execution_options(synchronize_session=False)
        )
