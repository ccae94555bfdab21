"""SQLAlchemy unit of work."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from budget_installments.domain.exceptions import PersistenceException
from budget_installments.domain.interfaces import UnitOfWork

logger = structlog.get_logger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commits or rolls back the request session as one transaction."""

    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[None, None]:
        try:
            yield
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(
                "unit_of_work_rolled_back",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceException() from e
        except Exception:
            await self._session.rollback()
            raise
