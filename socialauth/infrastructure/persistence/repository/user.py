"""SQL repository for local users."""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import Select, Table, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.domain.auth.model.social_profile import SocialProfile
from socialauth.domain.auth.model.user import LocalUser
from socialauth.domain.auth.port.repository import UserRepository
from socialauth.domain.shared.error import ConfigurationError, PersistenceError

logger = logging.getLogger(__name__)

Finder = Callable[[Select, Table], Select]
"""Narrows a user query; receives the statement and the users table."""

DEFAULT_FINDERS: Mapping[str, Finder] = {
    "all": lambda stmt, table: stmt,
    "active": lambda stmt, table: stmt.where(table.c.active.is_(True)),
}


class SqlUserRepository(UserRepository):
    """SQLAlchemy implementation of UserRepository over the reference users table.

    ``get_user`` is the default provisioning callback: it creates a user from
    the profile's name and email.
    """

    def __init__(
        self,
        session: AsyncSession,
        table: Table,
        finders: Mapping[str, Finder] | None = None,
    ) -> None:
        self.session = session
        self.table = table
        self.finders = {**DEFAULT_FINDERS, **(finders or {})}

    async def get(self, user_id: int | str, *, finder: str = "all") -> LocalUser | None:
        apply_finder = self.finders.get(finder)
        if apply_finder is None:
            raise ConfigurationError(f"Unknown user finder: {finder}", code="unknown_finder")

        pk = next(iter(self.table.primary_key.columns))
        stmt = apply_finder(select(self.table).where(pk == str(user_id)), self.table)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return LocalUser(**dict(row)) if row else None

    async def get_user(self, profile: SocialProfile) -> LocalUser:
        """Create a local user for a profile that is not linked yet."""
        display_name = profile.full_name or " ".join(
            part for part in (profile.first_name, profile.last_name) if part
        )
        row = {
            "id": str(uuid4()),
            "email": profile.email,
            "username": profile.username,
            "display_name": display_name or None,
            "password": None,
            "active": True,
            "created_at": datetime.now(UTC),
        }

        try:
            await self.session.execute(insert(self.table).values(**row))
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError("Unable to create user", code="user_save_failed") from e

        logger.debug("User created for %s/%s", profile.provider, profile.identifier)
        return LocalUser(**row)
