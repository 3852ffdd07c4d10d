"""Profile resolution: provider handshake to stored social profile."""

import logging

from socialauth.domain.auth.model.request import AuthRequest
from socialauth.domain.auth.model.social_profile import SocialProfile
from socialauth.domain.auth.model.value import PENDING_STATE_KEY, FlowError
from socialauth.domain.auth.port.provider_registry import ProviderRegistry
from socialauth.domain.auth.port.repository import SocialProfileRepository
from socialauth.domain.auth.service.identity_mapper import map_identity
from socialauth.domain.shared.error import FlowFailure, ProviderError
from socialauth.domain.shared.service import Service

logger = logging.getLogger(__name__)


class ProfileResolver(Service):
    """Completes the provider handshake and records the result.

    - exchanges the callback parameters for an access token, checking the
      state against the nonce in the browser session
    - fetches the provider identity for that token
    - finds or starts the profile for (provider, identity id) and patches it
    - saves the profile if anything changed
    """

    profile_repo: SocialProfileRepository
    provider_registry: ProviderRegistry
    log_errors: bool = True

    async def resolve(self, request: AuthRequest) -> SocialProfile:
        """Return the up-to-date, persisted profile for a callback.

        Raises:
            FlowFailure: PROVIDER_FAILURE if the provider is unknown or any
                provider call fails
            PersistenceError: If the profile could not be saved
        """
        # One nonce per login, spent by the first callback
        nonce = request.session.consume(PENDING_STATE_KEY)

        provider = self.provider_registry.get(request.provider)
        if provider is None:
            logger.warning("Callback for unknown provider: %s", request.provider)
            raise FlowFailure(FlowError.PROVIDER_FAILURE)

        try:
            token = await provider.get_access_token(request.query_params, nonce)
            identity = await provider.get_identity(token)
        except ProviderError as e:
            if self.log_errors:
                logger.error("%s", self._log_message(request, e), exc_info=e)
            raise FlowFailure(FlowError.PROVIDER_FAILURE) from e

        existing = await self.profile_repo.get_by_provider_and_identifier(
            request.provider, identity.id
        )
        profile = map_identity(request.provider, identity, token, existing)

        if profile.is_dirty():
            await self.profile_repo.save(profile)

        logger.debug(
            "Profile resolved: provider=%s, identifier=%s, new=%s",
            profile.provider,
            profile.identifier,
            existing is None,
        )
        return profile

    @staticmethod
    def _log_message(request: AuthRequest, error: ProviderError) -> str:
        message = f"[{type(error).__name__}] {error.message}"
        message += f"\nRequest URL: {request.url}"
        if request.referer:
            message += f"\nReferer URL: {request.referer}"
        if error.response_body:
            message += f"\nProvider Response: {error.response_body}"
        return message
