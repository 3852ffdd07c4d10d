"""SocialProfile entity for the auth domain.

Links a provider account to an (optional) local user.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from socialauth.domain.auth.model.identity import AccessToken
from socialauth.domain.auth.model.value import ProfileId
from socialauth.domain.shared.model.entity import Entity


class SocialProfile(Entity):
    """A provider account as last seen by this application.

    Examples:
    - GitHub: provider="github", identifier="583231"
    - ORCiD: provider="orcid", identifier="0000-0001-2345-6789"

    Invariants:
    - `(provider, identifier)` is globally unique
    - provider data is refreshed on every login, the row is never replaced
    - attributes the provider sends that have no column here are kept as extras
    """

    model_config = ConfigDict(extra="allow")

    id: ProfileId = Field(default_factory=ProfileId.generate)
    provider: str
    identifier: str | None = None
    user_id: int | str | None = None
    access_token: AccessToken | None = None

    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    full_name: str | None = None
    email: str | None = None
    email_verified: bool | None = None
    birth_date: str | None = None
    gender: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None

    @field_validator("identifier", "birth_date", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Providers send numeric ids and date objects; columns are strings.
        if value is None or isinstance(value, str):
            return value
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return str(value)

    @classmethod
    def create(cls, provider: str) -> "SocialProfile":
        """Start an empty profile for a provider."""
        return cls(provider=provider)

    def patch(self, data: dict[str, Any]) -> None:
        """Assign each key of ``data`` onto the profile."""
        fields = type(self).model_fields
        for key, value in data.items():
            if key not in fields and hasattr(type(self), key):
                continue  # would shadow a method or property
            setattr(self, key, value)

    @property
    def extras(self) -> dict[str, Any]:
        """Provider attributes without a dedicated field."""
        return dict(self.model_extra or {})

    def snapshot(self) -> dict[str, Any]:
        # Bookkeeping timestamps do not make a profile dirty.
        return self.model_dump(mode="json", exclude={"updated_at"})

    def touch(self) -> None:
        self.updated_at = datetime.now(UTC)
