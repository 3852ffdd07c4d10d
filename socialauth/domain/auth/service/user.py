"""User resolution: social profile to local user."""

import logging

from socialauth.domain.auth.model.social_profile import SocialProfile
from socialauth.domain.auth.model.user import LocalUser
from socialauth.domain.auth.model.value import FlowError
from socialauth.domain.auth.port.repository import (
    ProvisionUser,
    SocialProfileRepository,
    UserRepository,
)
from socialauth.domain.shared.error import FlowFailure
from socialauth.domain.shared.service import Service

logger = logging.getLogger(__name__)


class UserResolver(Service):
    """Finds the local user behind a profile, provisioning one on first login."""

    user_repo: UserRepository
    profile_repo: SocialProfileRepository
    provision_user: ProvisionUser
    finder: str = "all"
    password_field: str = "password"

    async def resolve(self, profile: SocialProfile) -> LocalUser:
        """Return the user linked to ``profile``.

        A profile without a user gets one from the provisioning callable and is
        linked to it. A profile whose user cannot be found through the finder
        is an inconsistency, never a reason to create a second user.

        Returns:
            The user, with the profile attached as ``social_profile`` and the
            password field removed

        Raises:
            FlowFailure: FINDER_FAILURE if the linked user cannot be found
            PersistenceError: If the profile could not be saved
        """
        if profile.user_id is not None:
            user = await self.user_repo.get(profile.user_id, finder=self.finder)
            if user is None:
                logger.warning(
                    "Linked user not found: provider=%s, identifier=%s, user_id=%s, finder=%s",
                    profile.provider,
                    profile.identifier,
                    profile.user_id,
                    self.finder,
                )
                raise FlowFailure(FlowError.FINDER_FAILURE)
        else:
            user = await self.provision_user(profile)
            profile.user_id = user.id
            logger.info(
                "New user provisioned: user_id=%s, provider=%s",
                user.id,
                profile.provider,
            )

        if profile.is_dirty():
            await self.profile_repo.save(profile)

        user.social_profile = profile
        user.unset(self.password_field)
        return user
