"""Test bootstrap.

Every test gets its own SQLite file (so each session has its own
connection, like a real server) with the schema built from the ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from dmroom.core.ports.services import Clock, NotificationDispatcher
from dmroom.infrastructure.db.base import Base
from dmroom.infrastructure.db.models import Users
from dmroom.infrastructure.db.repositories.logs import PgLogRepository
from dmroom.infrastructure.db.repositories.memberships import PgMembershipRepository
from dmroom.infrastructure.db.repositories.rooms import PgRoomRepository
from dmroom.infrastructure.db.repositories.users import PgUserRepository
from dmroom.infrastructure.db.unit_of_work import SqlAlchemyUnitOfWork
from dmroom.application.use_cases.logs import AppendLog
from dmroom.application.use_cases.rooms import EnsureRoom

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, 250000, tzinfo=timezone.utc)


class FixedClock(Clock):
    def now(self) -> datetime:  # type: ignore[override]
        return FIXED_NOW


class RecordingDispatcher(NotificationDispatcher):
    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []

    def dispatch(self, user_id: int, message: str) -> None:  # type: ignore[override]
        self.sent.append((user_id, message))

    async def drain(self) -> None:  # type: ignore[override]
        return None


@pytest.fixture()
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'dm.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def seeded_users(session_factory):
    async with session_factory() as s:
        s.add_all([
            Users(id=1, display_name="Alice"),
            Users(id=2, display_name="Bob"),
            Users(id=3, display_name="Carol"),
            Users(id=4, display_name="Dave <admin>"),
        ])
        await s.commit()
    return [1, 2, 3, 4]


@pytest.fixture()
async def session(session_factory, seeded_users):
    async with session_factory() as s:
        yield s


@pytest.fixture()
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


class Repos:
    def __init__(self, session: AsyncSession, dispatcher: NotificationDispatcher) -> None:
        self.session = session
        self.uow = SqlAlchemyUnitOfWork(session)
        self.rooms = PgRoomRepository(session)
        self.memberships = PgMembershipRepository(session)
        self.logs = PgLogRepository(session)
        self.users = PgUserRepository(session)
        self.dispatcher = dispatcher

    def ensure_room(self) -> EnsureRoom:
        return EnsureRoom(self.uow, self.rooms, self.logs)

    def append_log(self) -> AppendLog:
        return AppendLog(self.uow, self.logs, self.rooms, self.memberships, self.users, self.dispatcher, FixedClock())


@pytest.fixture()
def repos(session, dispatcher) -> Repos:
    return Repos(session, dispatcher)
