"""Identity provider port for the auth domain."""

from abc import abstractmethod
from collections.abc import Mapping
from typing import Protocol

from socialauth.domain.auth.model.identity import AccessToken, ExternalIdentity
from socialauth.domain.shared.port import Port


class IdentityProvider(Port, Protocol):
    """Port for external identity provider integrations.

    Implementations are adapters in infrastructure/ (e.g., OAuth2IdentityProvider).
    Every failure talking to the provider is raised as ProviderError.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique identifier for this provider (e.g., 'github')."""
        ...

    @abstractmethod
    def get_authorization_url(self, nonce: str) -> str:
        """Generate URL to redirect the user to for authentication.

        Args:
            nonce: Per-login secret kept in the browser session; it must come
                back inside the callback's `state`.

        Returns:
            Full URL on the provider, including client id, scope, callback
            URL and CSRF state.
        """
        ...

    @abstractmethod
    async def get_access_token(
        self, params: Mapping[str, str], nonce: str | None
    ) -> AccessToken:
        """Exchange the callback's query parameters for an access token.

        Args:
            params: Query parameters the provider appended to the callback URL
                (authorization code, state, error, ...), passed through untouched.
            nonce: The nonce this browser's session holds for the login, or
                None if it holds none. A state issued for another nonce is
                rejected.

        Raises:
            ProviderError: If the provider reported an error, the state does not
                verify, or the token request fails
        """
        ...

    @abstractmethod
    async def get_identity(self, token: AccessToken) -> ExternalIdentity:
        """Fetch the provider user the token belongs to.

        Raises:
            ProviderError: If the request fails or the payload has no user id
        """
        ...
