"""SQL repository for social profiles."""

from typing import Any
from uuid import UUID

from sqlalchemy import Table, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.domain.auth.model.social_profile import SocialProfile
from socialauth.domain.auth.model.value import ProfileId
from socialauth.domain.auth.port.repository import SocialProfileRepository
from socialauth.domain.shared.error import PersistenceError

_COLUMNS = (
    "provider",
    "identifier",
    "username",
    "first_name",
    "last_name",
    "full_name",
    "email",
    "email_verified",
    "birth_date",
    "gender",
)


def _row_to_profile(row: dict) -> SocialProfile:
    """Convert a database row to a SocialProfile model."""
    data = {
        **(row["extra"] or {}),
        **{name: row[name] for name in _COLUMNS},
        "id": ProfileId(UUID(row["id"])),
        "user_id": row["user_id"],
        "access_token": row["access_token"],
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }
    profile = SocialProfile(**data)
    profile.mark_clean()
    return profile


def _profile_to_row(profile: SocialProfile) -> dict[str, Any]:
    """Convert a SocialProfile model to a database row dict."""
    dumped = profile.model_dump(mode="json")
    return {
        "id": str(profile.id),
        "user_id": str(profile.user_id) if profile.user_id is not None else None,
        "access_token": dumped["access_token"],
        "extra": {key: dumped[key] for key in profile.extras} or None,
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
        **{name: dumped[name] for name in _COLUMNS},
    }


class SqlSocialProfileRepository(SocialProfileRepository):
    """SQLAlchemy implementation of SocialProfileRepository."""

    def __init__(self, session: AsyncSession, table: Table) -> None:
        self.session = session
        self.table = table

    async def get_by_provider_and_identifier(
        self, provider: str, identifier: str
    ) -> SocialProfile | None:
        stmt = select(self.table).where(
            self.table.c.provider == provider,
            self.table.c.identifier == str(identifier),
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return _row_to_profile(dict(row)) if row else None

    async def save(self, profile: SocialProfile) -> None:
        if profile.identifier is None:
            raise PersistenceError(
                "Unable to save social profile without identifier",
                code="profile_save_failed",
            )

        if not profile.is_new():
            profile.touch()
        row = _profile_to_row(profile)

        if profile.is_new():
            stmt = insert(self.table).values(**row)
        else:
            stmt = update(self.table).where(self.table.c.id == row["id"]).values(**row)

        try:
            await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Unable to save social profile: {profile.provider}/{profile.identifier}",
                code="profile_save_failed",
            ) from e

        profile.mark_clean()
