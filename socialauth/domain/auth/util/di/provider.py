"""DI provider for auth domain."""

import logging

from dishka import Provider, from_context, provide
from starlette.requests import Request

from socialauth.config import Config
from socialauth.domain.auth.port.provider_registry import ProviderRegistry
from socialauth.domain.auth.port.repository import (
    ProvisionUser,
    SocialProfileRepository,
    UserRepository,
)
from socialauth.domain.auth.port.session import SessionStore
from socialauth.domain.auth.service.flow import SocialAuthFlow
from socialauth.domain.auth.service.profile import ProfileResolver
from socialauth.domain.auth.service.user import UserResolver
from socialauth.domain.shared.error import ConfigurationError
from socialauth.domain.shared.uow import UnitOfWork
from socialauth.infrastructure.session.store import MappingSessionStore
from socialauth.util.di.scope import Scope

logger = logging.getLogger(__name__)


def resolve_provisioner(user_repo: UserRepository, callback_name: str) -> ProvisionUser:
    """Look up the provisioning callback by name on the user repository.

    Raises:
        ConfigurationError: If the repository has no such coroutine method
    """
    provision = getattr(user_repo, callback_name, None)
    if not callable(provision):
        raise ConfigurationError(
            f"{type(user_repo).__name__} has no user provisioning callback {callback_name!r}",
            code="missing_user_callback",
        )
    return provision


class AuthProvider(Provider):
    """DI provider for the social login flow.

    Args:
        provision_user: Creates users for first-time logins. When omitted,
            the ``auth.get_user_callback`` method of the user repository is used.
    """

    request = from_context(provides=Request, scope=Scope.UOW)

    def __init__(self, provision_user: ProvisionUser | None = None) -> None:
        super().__init__()
        self._provision_user = provision_user

    @provide(scope=Scope.UOW)
    def get_session_store(self, request: Request) -> SessionStore:
        if "session" not in request.scope:
            raise ConfigurationError(
                "SessionMiddleware must wrap the social auth middleware",
                code="missing_session",
            )
        return MappingSessionStore(request.session)

    @provide(scope=Scope.UOW)
    def get_profile_resolver(
        self,
        config: Config,
        profile_repo: SocialProfileRepository,
        registry: ProviderRegistry,
    ) -> ProfileResolver:
        return ProfileResolver(
            profile_repo=profile_repo,
            provider_registry=registry,
            log_errors=config.auth.log_errors,
        )

    @provide(scope=Scope.UOW)
    def get_user_resolver(
        self,
        config: Config,
        user_repo: UserRepository,
        profile_repo: SocialProfileRepository,
    ) -> UserResolver:
        provision_user = self._provision_user or resolve_provisioner(
            user_repo, config.auth.get_user_callback
        )
        return UserResolver(
            user_repo=user_repo,
            profile_repo=profile_repo,
            provision_user=provision_user,
            finder=config.auth.finder,
            password_field=config.auth.password_field,
        )

    @provide(scope=Scope.UOW)
    def get_flow(
        self,
        config: Config,
        registry: ProviderRegistry,
        profile_resolver: ProfileResolver,
        user_resolver: UserResolver,
        uow: UnitOfWork,
    ) -> SocialAuthFlow:
        return SocialAuthFlow(
            config=config.auth,
            provider_registry=registry,
            profile_resolver=profile_resolver,
            user_resolver=user_resolver,
            uow=uow,
        )
