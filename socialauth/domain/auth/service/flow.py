"""Social login flow: the login and callback actions."""

import logging
import secrets
from typing import assert_never

from socialauth.config import SocialAuthConfig
from socialauth.domain.auth.model.request import AuthRequest, Redirect
from socialauth.domain.auth.model.value import (
    PENDING_REDIRECT_KEY,
    PENDING_STATE_KEY,
    REDIRECT_QUERY_PARAM,
    FlowAction,
)
from socialauth.domain.auth.port.provider_registry import ProviderRegistry
from socialauth.domain.auth.service.profile import ProfileResolver
from socialauth.domain.auth.service.redirect import absolute_url, validate_redirect, with_error
from socialauth.domain.auth.service.user import UserResolver
from socialauth.domain.shared.error import BadRequestError, FlowFailure, NotFoundError
from socialauth.domain.shared.service import Service
from socialauth.domain.shared.uow import UnitOfWork

logger = logging.getLogger(__name__)


class SocialAuthFlow(Service):
    """Drives a provider login from the first redirect to the signed-in session.

    - login: remember where to go afterwards and the state nonce, send the
      browser to the provider
    - callback: resolve profile and user, write the user to session, redirect

    Recoverable callback failures end in a redirect to the login page carrying
    a FlowError code. Every other error propagates.
    """

    config: SocialAuthConfig
    provider_registry: ProviderRegistry
    profile_resolver: ProfileResolver
    user_resolver: UserResolver
    uow: UnitOfWork

    async def handle(self, request: AuthRequest) -> Redirect:
        """Dispatch a request to its action."""
        match request.action:
            case FlowAction.LOGIN:
                return await self.login(request)
            case FlowAction.CALLBACK:
                return await self.callback(request)
            case _:
                assert_never(request.action)

    async def login(self, request: AuthRequest) -> Redirect:
        """Start a login: redirect to the provider's authorization page.

        Raises:
            BadRequestError: If the request method is not the configured one
            NotFoundError: If the provider is not configured
        """
        if request.method.upper() != self.config.request_method:
            raise BadRequestError(
                f"Login requires {self.config.request_method}, got {request.method}",
                code="method_not_allowed",
            )

        provider = self.provider_registry.get(request.provider)
        if provider is None:
            raise NotFoundError(
                f"Unknown identity provider: {request.provider}",
                code="unknown_provider",
            )

        self._remember_redirect(request)

        nonce = secrets.token_urlsafe(32)
        request.session.write(PENDING_STATE_KEY, nonce)
        authorization_url = provider.get_authorization_url(nonce)

        logger.info("Social login initiated for provider=%s", request.provider)
        return Redirect(authorization_url)

    async def callback(self, request: AuthRequest) -> Redirect:
        """Finish a login and sign the user in.

        Profile and user writes are committed before the session is touched.

        Raises:
            PersistenceError: If a profile or user write fails
        """
        try:
            profile = await self.profile_resolver.resolve(request)
            user = await self.user_resolver.resolve(profile)
        except FlowFailure as failure:
            await self.uow.commit()
            logger.info(
                "Social login failed: provider=%s, error=%s", request.provider, failure.error
            )
            login_url = absolute_url(request.base_url, self.config.login_url)
            return Redirect(with_error(login_url, failure.error.value))

        await self.uow.commit()

        user.unset(self.config.password_field)
        session_user = user if self.config.user_entity else user.to_dict()
        request.session.write(self.config.session_key, session_user)

        target = request.session.consume(PENDING_REDIRECT_KEY) or self.config.login_redirect
        logger.info(
            "Social login complete: user_id=%s, provider=%s", user.id, request.provider
        )
        return Redirect(absolute_url(request.base_url, target))

    def _remember_redirect(self, request: AuthRequest) -> None:
        request.session.delete(PENDING_REDIRECT_KEY)

        target = validate_redirect(request.query_params.get(REDIRECT_QUERY_PARAM))
        if target is None:
            return

        request.session.write(PENDING_REDIRECT_KEY, target)
