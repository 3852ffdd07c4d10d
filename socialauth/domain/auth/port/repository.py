"""Repository ports for the auth domain."""

from abc import abstractmethod
from collections.abc import Awaitable, Callable
from typing import Protocol

from socialauth.domain.auth.model.social_profile import SocialProfile
from socialauth.domain.auth.model.user import LocalUser
from socialauth.domain.shared.port import Port

ProvisionUser = Callable[[SocialProfile], Awaitable[LocalUser]]
"""Creates (and stores) the local user for a profile that has none yet.

Must return a user with its primary key set. Failures propagate.
"""


class SocialProfileRepository(Port, Protocol):
    """Repository for SocialProfile persistence."""

    @abstractmethod
    async def get_by_provider_and_identifier(
        self, provider: str, identifier: str
    ) -> SocialProfile | None:
        """Get the profile for a provider account, marked clean."""
        ...

    @abstractmethod
    async def save(self, profile: SocialProfile) -> None:
        """Insert or update a profile and mark it clean.

        Raises:
            PersistenceError: If the profile could not be written
        """
        ...


class UserRepository(Port, Protocol):
    """Read access to the host application's users."""

    @abstractmethod
    async def get(self, user_id: int | str, *, finder: str = "all") -> LocalUser | None:
        """Get a user by primary key through a named finder.

        Args:
            user_id: Primary key value
            finder: Named query variant; "all" applies no extra conditions

        Raises:
            ConfigurationError: If the finder is not registered
        """
        ...
