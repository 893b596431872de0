from __future__ import annotations

from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ....core.ports.services import Clock, NotificationDispatcher, TokenProvider
from ....infrastructure.db.repositories.logs import PgLogRepository
from ....infrastructure.db.repositories.memberships import PgMembershipRepository
from ....infrastructure.db.repositories.rooms import PgRoomRepository
from ....infrastructure.db.repositories.users import PgUserRepository
from ....infrastructure.db.session import AsyncSessionLocal, get_session
from ....infrastructure.db.unit_of_work import SqlAlchemyUnitOfWork
from ....infrastructure.security.jwt_provider import JoseTokenProvider
from ....infrastructure.services.clock import SystemClock
from ....infrastructure.services.notifications import BackgroundNotificationDispatcher, DbNotifier


# DB session provider (request-scoped); every repository of a request shares it
async def get_db_session() -> AsyncIterator[AsyncSession]:
    async with get_session() as s:
        yield s


async def get_unit_of_work(session: AsyncSession = Depends(get_db_session)):
    return SqlAlchemyUnitOfWork(session)


# Repositories
async def get_user_repo(session: AsyncSession = Depends(get_db_session)):
    return PgUserRepository(session)


async def get_room_repo(session: AsyncSession = Depends(get_db_session)):
    return PgRoomRepository(session)


async def get_membership_repo(session: AsyncSession = Depends(get_db_session)):
    return PgMembershipRepository(session)


async def get_log_repo(session: AsyncSession = Depends(get_db_session)):
    return PgLogRepository(session)


# Services
def get_token_provider() -> TokenProvider:
    return JoseTokenProvider()


def get_clock() -> Clock:
    return SystemClock()


def get_notification_dispatcher() -> NotificationDispatcher:
    # one dispatcher per process so shutdown can drain every pending task
    return _get_dispatcher_singleton()


@lru_cache(maxsize=1)
def _get_dispatcher_singleton() -> NotificationDispatcher:
    return BackgroundNotificationDispatcher(DbNotifier(AsyncSessionLocal))
