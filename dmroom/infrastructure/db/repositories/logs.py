from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ....core.domain.models import DirectMessageLog
from ....core.domain.values import NO_LOG_ID, RangeRequest
from ....core.ports.repositories import LogRepository
from ..models import DirectMessageLogs, DirectMessageRooms
from ..range_query import apply_range


def _to_domain(r) -> DirectMessageLog:
    return DirectMessageLog(
        id=r.id,
        room_id=r.room_id,
        member_id=r.member_id,
        content=r.content,
        date=r.date,
        is_html=bool(r.is_html),
        is_liked=bool(r.is_liked),
    )


class PgLogRepository(LogRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, room_id: int, member_id: int, content: str, date: int, is_html: bool = False) -> int:  # type: ignore[override]
        row = DirectMessageLogs(room_id=room_id, member_id=member_id, content=content, date=date, is_html=is_html, is_liked=False)
        self.session.add(row)
        await self.session.flush()
        return row.id

    async def newest_id(self) -> Optional[int]:  # type: ignore[override]
        return (await self.session.execute(select(func.max(DirectMessageLogs.id)))).scalar()

    async def get(self, log_id: int) -> Optional[DirectMessageLog]:  # type: ignore[override]
        stmt = select(DirectMessageLogs).where(DirectMessageLogs.id == log_id)
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return _to_domain(row) if row else None

    async def list(self, room_id: int, hide_log_id: int, request: RangeRequest) -> list[DirectMessageLog]:  # type: ignore[override]
        L = DirectMessageLogs
        stmt = (
            select(
                L.id.label("id"),
                L.room_id.label("room_id"),
                L.member_id.label("member_id"),
                L.content.label("content"),
                L.date.label("date"),
                L.is_html.label("is_html"),
                L.is_liked.label("is_liked"),
            )
            .join(DirectMessageRooms, DirectMessageRooms.id == L.room_id)
            .where(
                L.room_id == room_id,
                L.id > hide_log_id,
                or_(
                    DirectMessageRooms.start_inclusive_log_id == NO_LOG_ID,
                    L.id >= DirectMessageRooms.start_inclusive_log_id,
                ),
            )
        )
        stmt = apply_range(request, stmt, L.id, "id")
        rows = (await self.session.execute(stmt)).all()
        return [_to_domain(r) for r in rows]

    async def set_liked(self, log_id: int, is_liked: bool) -> None:  # type: ignore[override]
        await self.session.execute(
            update(DirectMessageLogs)
            .where(DirectMessageLogs.id == log_id)
            .values(is_liked=is_liked)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
