"""Unit tests for SqlSocialProfileRepository."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.domain.auth.model.identity import AccessToken
from socialauth.domain.auth.model.social_profile import SocialProfile
from socialauth.domain.shared.error import PersistenceError
from socialauth.infrastructure.persistence.repository.social_profile import (
    SqlSocialProfileRepository,
)
from socialauth.infrastructure.persistence.tables import AuthTables


def make_profile(**overrides) -> SocialProfile:
    values = {
        "provider": "github",
        "identifier": "583231",
        "full_name": "Jane Doe",
        "email": "jane@example.com",
        "email_verified": True,
        "access_token": AccessToken(token="gho_abc", extra={"scope": "read:user"}),
    }
    values.update(overrides)
    return SocialProfile(**values)


class TestSqlSocialProfileRepository:
    @pytest.mark.asyncio
    async def test_save_and_load(self, db_session: AsyncSession, tables: AuthTables):
        repo = SqlSocialProfileRepository(db_session, tables.social_profiles)
        profile = make_profile(pictureURL="https://img.example/1.png")

        await repo.save(profile)
        loaded = await repo.get_by_provider_and_identifier("github", "583231")

        assert loaded is not None
        assert loaded.id == profile.id
        assert loaded.full_name == "Jane Doe"
        assert loaded.email_verified is True
        assert loaded.access_token == AccessToken(token="gho_abc", extra={"scope": "read:user"})
        assert loaded.extras == {"pictureURL": "https://img.example/1.png"}
        assert not loaded.is_dirty()

    @pytest.mark.asyncio
    async def test_save_marks_clean(self, db_session: AsyncSession, tables: AuthTables):
        repo = SqlSocialProfileRepository(db_session, tables.social_profiles)
        profile = make_profile()

        await repo.save(profile)

        assert not profile.is_new()
        assert not profile.is_dirty()

    @pytest.mark.asyncio
    async def test_update_existing(self, db_session: AsyncSession, tables: AuthTables):
        repo = SqlSocialProfileRepository(db_session, tables.social_profiles)
        await repo.save(make_profile())
        profile = await repo.get_by_provider_and_identifier("github", "583231")

        profile.user_id = "u-1"
        profile.access_token = AccessToken(token="gho_new")
        await repo.save(profile)
        reloaded = await repo.get_by_provider_and_identifier("github", "583231")

        assert reloaded.user_id == "u-1"
        assert reloaded.access_token.token == "gho_new"
        assert reloaded.updated_at is not None

    @pytest.mark.asyncio
    async def test_lookup_is_scoped_to_provider(self, db_session: AsyncSession, tables: AuthTables):
        repo = SqlSocialProfileRepository(db_session, tables.social_profiles)
        await repo.save(make_profile())

        assert await repo.get_by_provider_and_identifier("gitlab", "583231") is None
        assert await repo.get_by_provider_and_identifier("github", "1") is None

    @pytest.mark.asyncio
    async def test_duplicate_pair_is_persistence_error(
        self, db_session: AsyncSession, tables: AuthTables
    ):
        repo = SqlSocialProfileRepository(db_session, tables.social_profiles)
        await repo.save(make_profile())

        with pytest.raises(PersistenceError):
            await repo.save(make_profile())

    @pytest.mark.asyncio
    async def test_profile_without_identifier_is_rejected(
        self, db_session: AsyncSession, tables: AuthTables
    ):
        repo = SqlSocialProfileRepository(db_session, tables.social_profiles)

        with pytest.raises(PersistenceError):
            await repo.save(SocialProfile.create("github"))
