from collections.abc import Iterable

from dishka import AsyncContainer, Provider, from_context, make_async_container

from socialauth.config import Config
from socialauth.domain.auth.port.provider_registry import ProviderRegistry
from socialauth.domain.auth.port.repository import ProvisionUser
from socialauth.domain.auth.util.di import AuthProvider
from socialauth.infrastructure.auth.di import AuthInfraProvider
from socialauth.infrastructure.persistence.di import PersistenceProvider
from socialauth.util.di.scope import Scope


class ConfigProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)


def create_container(
    config: Config,
    *,
    provision_user: ProvisionUser | None = None,
    registry: ProviderRegistry | None = None,
    providers: Iterable[Provider] = (),
) -> AsyncContainer:
    """Build the DI container from a fully resolved config."""
    return make_async_container(
        ConfigProvider(),
        PersistenceProvider(),
        AuthInfraProvider(registry),
        AuthProvider(provision_user),
        *providers,
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
