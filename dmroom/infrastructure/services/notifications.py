from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...core.ports.services import NotificationDispatcher, Notifier
from ..db.models import Notifications

logger = logging.getLogger(__name__)


class DbNotifier(Notifier):
    """Stores notifications in the ``notifications`` table.

    Runs outside the request, so it opens its own session per call instead of
    borrowing the one the message was written with.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], now: Callable[[], float] = time.time) -> None:
        self._session_factory = session_factory
        self._now = now

    async def notify(self, user_id: int, message: str) -> None:  # type: ignore[override]
        async with self._session_factory() as session:
            session.add(Notifications(user_id=user_id, content=message, created_at=math.ceil(self._now()), is_read=False))
            await session.commit()


class BackgroundNotificationDispatcher(NotificationDispatcher):
    """Runs each notification as its own asyncio task.

    Tasks are referenced until done so they are not garbage collected mid-flight;
    failures are logged and go nowhere else.
    """

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier
        self._tasks: set[asyncio.Task[None]] = set()

    def dispatch(self, user_id: int, message: str) -> None:  # type: ignore[override]
        task = asyncio.get_running_loop().create_task(self._notifier.notify(user_id, message))
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("notification delivery failed", exc_info=exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:  # type: ignore[override]
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
