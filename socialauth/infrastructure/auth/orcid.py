"""ORCiD identity provider adapter."""

from socialauth.domain.auth.model.identity import AccessToken, ExternalIdentity
from socialauth.infrastructure.auth.oauth2 import OAuth2IdentityProvider


class OrcidIdentityProvider(OAuth2IdentityProvider):
    """IdentityProvider for ORCiD OAuth.

    ORCiD returns the user directly in the token response, so there is no
    identity request:

        {
          "access_token": "...",
          "token_type": "bearer",
          "scope": "/authenticate",
          "name": "Jane Doe",
          "orcid": "0000-0001-2345-6789"
        }
    """

    default_scope = "/authenticate"

    @property
    def base_url(self) -> str:
        return "https://sandbox.orcid.org" if self._config.sandbox else "https://orcid.org"

    @property
    def authorize_url(self) -> str:
        return self._config.authorize_url or f"{self.base_url}/oauth/authorize"

    @property
    def token_url(self) -> str:
        return self._config.token_url or f"{self.base_url}/oauth/token"

    async def get_identity(self, token: AccessToken) -> ExternalIdentity:
        payload = {
            "id": token.extra.get("orcid") or token.user_id,
            "fullname": token.extra.get("name"),
        }
        return self._to_identity(payload)
