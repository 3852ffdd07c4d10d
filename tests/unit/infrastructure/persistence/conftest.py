"""In-memory SQLite fixtures for repository tests."""

from collections.abc import AsyncIterator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.config import DatabaseConfig
from socialauth.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    create_tables,
)
from socialauth.infrastructure.persistence.tables import AuthTables, build_tables


@pytest_asyncio.fixture
async def tables() -> AuthTables:
    return build_tables()


@pytest_asyncio.fixture
async def db_session(tables: AuthTables) -> AsyncIterator[AsyncSession]:
    engine = create_db_engine(DatabaseConfig())
    await create_tables(engine, tables.metadata)
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session
    await engine.dispose()
