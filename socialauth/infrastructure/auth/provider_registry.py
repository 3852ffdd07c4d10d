"""Provider registry implementation."""

import logging

import httpx

from socialauth.config import Config
from socialauth.domain.auth.port.identity_provider import IdentityProvider
from socialauth.domain.auth.port.provider_registry import ProviderRegistry
from socialauth.infrastructure.auth.oauth2 import OAuth2IdentityProvider
from socialauth.infrastructure.auth.orcid import OrcidIdentityProvider
from socialauth.infrastructure.auth.state import StateSigner

logger = logging.getLogger(__name__)

_PROVIDER_TYPES: dict[str, type[OAuth2IdentityProvider]] = {
    "oauth2": OAuth2IdentityProvider,
    "orcid": OrcidIdentityProvider,
}


class InMemoryProviderRegistry(ProviderRegistry):
    """In-memory provider registry.

    Stores a mapping of provider names to their implementations.
    Providers are registered at application startup via DI.
    """

    def __init__(self, providers: dict[str, IdentityProvider] | None = None) -> None:
        self._providers: dict[str, IdentityProvider] = providers or {}

    def get(self, provider: str) -> IdentityProvider | None:
        return self._providers.get(provider)

    def available_providers(self) -> list[str]:
        return list(self._providers.keys())

    def register(self, name: str, provider: IdentityProvider) -> None:
        self._providers[name] = provider


def build_provider_registry(
    config: Config,
    http_client: httpx.AsyncClient,
    signer: StateSigner,
) -> InMemoryProviderRegistry:
    """Create one adapter per configured provider that has a client id."""
    registry = InMemoryProviderRegistry()
    for name, provider_config in config.auth.providers.items():
        if not provider_config.client_id:
            logger.warning("Skipping provider %s: no client_id configured", name)
            continue
        adapter_cls = _PROVIDER_TYPES[provider_config.type]
        registry.register(
            name,
            adapter_cls(
                name=name,
                config=provider_config,
                http_client=http_client,
                signer=signer,
                callback_url=config.auth.callback_url_for(name, config.server.base_url),
            ),
        )
    return registry
