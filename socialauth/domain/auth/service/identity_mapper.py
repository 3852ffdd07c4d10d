"""Maps a provider identity onto the social profile schema."""

from types import MappingProxyType
from typing import Any

from socialauth.domain.auth.model.identity import AccessToken, ExternalIdentity
from socialauth.domain.auth.model.social_profile import SocialProfile

FIELD_RENAMES = MappingProxyType(
    {
        "id": "identifier",
        "lastname": "last_name",
        "firstname": "first_name",
        "birthday": "birth_date",
        "emailVerified": "email_verified",
        "fullname": "full_name",
        "sex": "gender",
    }
)
"""Provider field name -> profile field name. Anything else keeps its name."""

RESERVED_FIELDS = frozenset({"id", "provider", "user_id", "created_at", "updated_at"})
"""Profile fields a provider payload may never overwrite."""


def profile_data(identity: ExternalIdentity, token: AccessToken) -> dict[str, Any]:
    """Compute the patch a provider login applies to a profile.

    Renamed fields are applied after passthrough ones, so a payload carrying
    both ``fullname`` and ``full_name`` resolves the same way whatever the
    key order.
    """
    data: dict[str, Any] = {"access_token": token}
    renamed: dict[str, Any] = {}

    for key, value in identity.items():
        if key in FIELD_RENAMES:
            renamed[FIELD_RENAMES[key]] = value
        elif key not in RESERVED_FIELDS and key != "access_token" and not key.startswith("_"):
            data[key] = value

    data.update(renamed)
    return data


def map_identity(
    provider: str,
    identity: ExternalIdentity,
    token: AccessToken,
    existing: SocialProfile | None = None,
) -> SocialProfile:
    """Patch (or start) the profile for a provider identity.

    Args:
        provider: Provider name the profile belongs to
        identity: Identity returned by the provider
        token: Access token returned alongside it
        existing: Stored profile for this identity, if any

    Returns:
        The patched profile, not yet persisted
    """
    profile = existing if existing is not None else SocialProfile.create(provider)
    profile.patch(profile_data(identity, token))
    return profile
