"""SQLAlchemy unit of work."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.domain.shared.error import PersistenceError
from socialauth.domain.shared.uow import UnitOfWork


class SqlUnitOfWork(UnitOfWork):
    """Commits the request's AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError("Unable to commit changes", code="commit_failed") from e
