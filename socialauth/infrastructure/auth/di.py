"""DI provider for auth infrastructure."""

from collections.abc import AsyncIterable

import httpx
from dishka import Provider, provide

from socialauth.config import Config
from socialauth.domain.auth.port.provider_registry import ProviderRegistry
from socialauth.domain.shared.error import ConfigurationError
from socialauth.infrastructure.auth.provider_registry import build_provider_registry
from socialauth.infrastructure.auth.state import StateSigner
from socialauth.util.di.scope import Scope

# HTTP client timeout configuration
_HTTP_TIMEOUT = httpx.Timeout(
    connect=5.0,  # Connection timeout
    read=10.0,  # Read timeout
    write=5.0,  # Write timeout
    pool=5.0,  # Pool timeout
)


class AuthInfraProvider(Provider):
    """DI provider for identity provider adapters.

    Args:
        registry: Ready-made provider registry; replaces the one built from
            config (host applications with their own provider SDK)
    """

    def __init__(self, registry: ProviderRegistry | None = None) -> None:
        super().__init__()
        self._registry = registry

    @provide(scope=Scope.APP)
    async def get_auth_http_client(self) -> AsyncIterable[httpx.AsyncClient]:
        """Shared HTTP client for provider calls (connection pooling)."""
        async with httpx.AsyncClient(timeout=_HTTP_TIMEOUT) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_state_signer(self, config: Config) -> StateSigner:
        secret = config.auth.state_secret or config.session.secret_key
        if not secret:
            raise ConfigurationError(
                "Set SOCIALAUTH_SESSION__SECRET_KEY or SOCIALAUTH_AUTH__STATE_SECRET",
                code="missing_secret",
            )
        return StateSigner(secret)

    @provide(scope=Scope.APP)
    def get_provider_registry(
        self, config: Config, http_client: httpx.AsyncClient, signer: StateSigner
    ) -> ProviderRegistry:
        """Provide ProviderRegistry with configured identity providers."""
        if self._registry is not None:
            return self._registry
        return build_provider_registry(config, http_client, signer)
