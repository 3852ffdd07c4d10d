from collections.abc import AsyncIterable

from dishka import Provider, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from socialauth.config import Config
from socialauth.domain.auth.port.repository import SocialProfileRepository, UserRepository
from socialauth.domain.shared.uow import UnitOfWork
from socialauth.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    create_tables,
)
from socialauth.infrastructure.persistence.repository.social_profile import (
    SqlSocialProfileRepository,
)
from socialauth.infrastructure.persistence.repository.user import SqlUserRepository
from socialauth.infrastructure.persistence.tables import AuthTables, build_tables
from socialauth.infrastructure.persistence.uow import SqlUnitOfWork
from socialauth.util.di.scope import Scope


class PersistenceProvider(Provider):
    # APP-scoped factories
    @provide(scope=Scope.APP)
    def get_tables(self, config: Config) -> AuthTables:
        return build_tables(
            social_profile_table=config.auth.social_profile_model,
            user_table=config.auth.user_model,
        )

    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config, tables: AuthTables) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config.database)
        if config.database.create_tables:
            await create_tables(engine, tables.metadata)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per unit of work)
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    # UOW-scoped repositories
    @provide(scope=Scope.UOW)
    def get_profile_repo(
        self, session: AsyncSession, tables: AuthTables
    ) -> SocialProfileRepository:
        return SqlSocialProfileRepository(session, tables.social_profiles)

    @provide(scope=Scope.UOW)
    def get_user_repo(self, session: AsyncSession, tables: AuthTables) -> UserRepository:
        return SqlUserRepository(session, tables.users)

    @provide(scope=Scope.UOW)
    def get_uow(self, session: AsyncSession) -> UnitOfWork:
        return SqlUnitOfWork(session)
