"""Provider registry port for the auth domain."""

from abc import abstractmethod
from typing import Protocol

from socialauth.domain.auth.port.identity_provider import IdentityProvider
from socialauth.domain.shared.port import Port


class ProviderRegistry(Port, Protocol):
    """Registry of configured identity providers, looked up by route name."""

    @abstractmethod
    def get(self, provider: str) -> IdentityProvider | None:
        """Get an identity provider by name, or None if it is not configured."""
        ...

    @abstractmethod
    def available_providers(self) -> list[str]:
        """Names of all providers that can be used for login."""
        ...

    def is_available(self, provider: str) -> bool:
        return provider in self.available_providers()
