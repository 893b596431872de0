from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config import get_settings


_settings = get_settings()
db_url = _settings.DATABASE_URL

engine_kwargs: dict = {"pool_pre_ping": True, "echo": _settings.DB_ECHO}
# sqlite (:memory: / aiosqlite) does not take pool sizing arguments
if not db_url.startswith("sqlite"):
    engine_kwargs.update({
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
    })

ENGINE: AsyncEngine = create_async_engine(db_url, **engine_kwargs)
AsyncSessionLocal = async_sessionmaker(bind=ENGINE, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session
