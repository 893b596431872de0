from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ....core.domain.models import User
from ....core.ports.repositories import UserRepository
from ..models import Users


class PgUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:  # type: ignore[override]
        row = await self.session.get(Users, user_id)
        if row:
            return User(id=row.id, display_name=row.display_name)
        return None

    async def get_display_name(self, user_id: int) -> Optional[str]:  # type: ignore[override]
        stmt = select(Users.display_name).where(Users.id == user_id)
        return (await self.session.execute(stmt)).scalar_one_or_none()
