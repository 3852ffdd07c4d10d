"""What an identity provider hands back after a successful handshake."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from socialauth.domain.shared.model.value import ValueObject


class AccessToken(ValueObject):
    """Opaque provider credential.

    Stored on the social profile as-is; nothing in the login flow reads it.
    """

    token: str
    refresh_token: str | None = None
    expires_at: int | None = None  # Unix timestamp
    user_id: str | None = None  # Provider user id when the token response carries one
    extra: dict[str, Any] = {}


@dataclass(frozen=True)
class ExternalIdentity:
    """A provider user, keyed by the provider's own field names.

    Field names follow the provider SDK convention: ``id``, ``firstname``,
    ``lastname``, ``fullname``, ``emailVerified``, ``birthday``, ``sex``,
    ``email``, ``username``, ``pictureURL`` and whatever else a provider adds.
    Only ``id`` is required.
    """

    id: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        attrs = {k: v for k, v in self.attributes.items() if k != "id"}
        object.__setattr__(self, "attributes", MappingProxyType(attrs))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExternalIdentity":
        """Build from a flat provider payload containing an ``id`` key."""
        if data.get("id") in (None, ""):
            raise ValueError("Provider identity has no id")
        return cls(id=str(data["id"]), attributes=data)

    def items(self) -> Iterator[tuple[str, Any]]:
        """All fields of the identity, ``id`` included."""
        yield "id", self.id
        yield from self.attributes.items()

    def get(self, name: str, default: Any = None) -> Any:
        if name == "id":
            return self.id
        return self.attributes.get(name, default)
