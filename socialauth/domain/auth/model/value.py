"""Value objects for the auth domain."""

from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import RootModel

REDIRECT_QUERY_PARAM = "redirect"
"""Query string key carrying the page to return to after login."""

PENDING_REDIRECT_KEY = "SocialAuth.redirectUrl"
"""Session key holding the post-login destination between login and callback."""

PENDING_STATE_KEY = "SocialAuth.state"
"""Session key holding the nonce the callback's OAuth state must carry."""


class ProfileId(RootModel[UUID]):
    """Unique identifier for a SocialProfile."""

    @classmethod
    def generate(cls) -> "ProfileId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


class FlowError(StrEnum):
    """Recoverable callback failures, surfaced to the browser as ``?error=<code>``."""

    PROVIDER_FAILURE = "provider_failure"
    FINDER_FAILURE = "finder_failure"


class FlowAction(StrEnum):
    """Actions the social login flow answers to."""

    LOGIN = "login"
    CALLBACK = "callback"

    @classmethod
    def parse(cls, action: str) -> "FlowAction | None":
        """Return the matching action, or None for anything else."""
        try:
            return cls(action)
        except ValueError:
            return None
