"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_handyman_repo import (
    SQLAlchemyHandymanRepository,
)

logger = structlog.get_logger()


class SQLAlchemyUnitOfWork:
    """One session per ``async with`` block; rolled back if the block raises."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._handymen: Optional[SQLAlchemyHandymanRepository] = None

    @property
    def handymen(self) -> SQLAlchemyHandymanRepository:
        """Handyman profile repository bound to the open session."""
        if self._handymen is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._handymen

    async def commit(self) -> None:
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        self._handymen = SQLAlchemyHandymanRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        if self._session is None:
            return
        try:
            if exc_type:
                logger.debug("uow_rollback", error_type=exc_type.__name__)
                await self.rollback()
        finally:
            await self._session.close()
            self._session = None
            self._handymen = None
