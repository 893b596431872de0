from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.errors import ConflictError, StorageError
from ...core.ports.repositories import UnitOfWork

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:  # type: ignore[override]
        # reads before the write autobegin a transaction; close it so the
        # write scope starts clean
        if self.session.in_transaction():
            await self.session.commit()
        try:
            async with self.session.begin():
                yield
        except IntegrityError as e:
            logger.info("transaction rolled back on integrity error: %s", e.orig)
            raise ConflictError("Conflicting row already exists") from e
        except SQLAlchemyError as e:
            logger.exception("transaction rolled back")
            raise StorageError("Storage operation failed") from e
