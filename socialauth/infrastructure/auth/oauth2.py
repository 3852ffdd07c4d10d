"""Generic OAuth2 identity provider adapter."""

import hmac
import logging
import time
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx

from socialauth.config import ProviderConfig
from socialauth.domain.auth.model.identity import AccessToken, ExternalIdentity
from socialauth.domain.auth.port.identity_provider import IdentityProvider
from socialauth.domain.shared.error import ProviderError
from socialauth.infrastructure.auth.state import StateSigner

logger = logging.getLogger(__name__)

_TOKEN_KEYS = frozenset({"access_token", "refresh_token", "expires_in", "user_id"})


class OAuth2IdentityProvider(IdentityProvider):
    """IdentityProvider for authorization-code OAuth2 providers.

    The user payload from ``identity_url`` is renamed through the provider's
    ``identity_fields`` so that it uses the field names the identity mapper
    knows (``id``, ``firstname``, ``emailVerified``, ...).
    """

    default_scope = ""

    def __init__(
        self,
        name: str,
        config: ProviderConfig,
        http_client: httpx.AsyncClient,
        signer: StateSigner,
        callback_url: str,
    ) -> None:
        self._name = name
        self._config = config
        self._http = http_client
        self._signer = signer
        self._callback_url = callback_url

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def authorize_url(self) -> str:
        return self._config.authorize_url

    @property
    def token_url(self) -> str:
        return self._config.token_url

    def get_authorization_url(self, nonce: str) -> str:
        params = {
            "client_id": self._config.client_id,
            "response_type": "code",
            "redirect_uri": self._callback_url,
            "state": self._signer.create(self._name, nonce),
        }
        if scope := self._config.scope or self.default_scope:
            params["scope"] = scope
        params.update(self._config.options)
        return f"{self.authorize_url}?{urlencode(params)}"

    async def get_access_token(
        self, params: Mapping[str, str], nonce: str | None
    ) -> AccessToken:
        if error := params.get("error"):
            raise ProviderError(
                f"{self._name} denied authorization: {error} "
                f"{params.get('error_description', '')}".rstrip(),
                code="authorization_denied",
            )

        if not self._state_matches(params.get("state", ""), nonce):
            raise ProviderError(f"{self._name} callback state is invalid", code="invalid_state")

        code = params.get("code")
        if not code:
            raise ProviderError(f"{self._name} callback has no code", code="missing_code")

        response = await self._send(
            "POST",
            self.token_url,
            data={
                "client_id": self._config.client_id,
                "client_secret": self._config.client_secret,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._callback_url,
            },
            headers={"Accept": "application/json"},
        )
        payload = self._json(response)

        access_token = payload.get("access_token")
        if not access_token:
            raise ProviderError(
                f"{self._name} token response has no access_token",
                code="oauth_error",
                response_body=response.text,
            )

        expires_at = None
        if payload.get("expires_in") is not None:
            try:
                expires_at = int(time.time()) + int(payload["expires_in"])
            except (TypeError, ValueError):
                logger.warning("Ignoring non-numeric expires_in from %s", self._name)

        return AccessToken(
            token=str(access_token),
            refresh_token=payload.get("refresh_token"),
            expires_at=expires_at,
            user_id=str(payload["user_id"]) if payload.get("user_id") is not None else None,
            extra={k: v for k, v in payload.items() if k not in _TOKEN_KEYS},
        )

    async def get_identity(self, token: AccessToken) -> ExternalIdentity:
        response = await self._send(
            "GET",
            self._config.identity_url,
            headers={
                "Authorization": f"Bearer {token.token}",
                "Accept": "application/json",
            },
        )
        return self._to_identity(self._json(response), response.text)

    def _state_matches(self, state: str, nonce: str | None) -> bool:
        claims = self._signer.verify(state)
        if claims is None or nonce is None:
            return False
        provider, state_nonce = claims
        return provider == self._name and hmac.compare_digest(state_nonce.encode(), nonce.encode())

    def _to_identity(self, payload: Mapping[str, Any], raw: str | None = None) -> ExternalIdentity:
        renames = self._config.identity_fields
        data = {renames.get(key, key): value for key, value in payload.items()}
        try:
            return ExternalIdentity.from_mapping(data)
        except ValueError as e:
            raise ProviderError(
                f"{self._name} identity has no id",
                code="oauth_error",
                response_body=raw,
            ) from e

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise ProviderError(
                f"Failed to connect to {self._name}: {e}",
                code="idp_unavailable",
            ) from e

        if response.status_code != 200:
            logger.debug(
                "%s %s returned status=%d", self._name, url, response.status_code
            )
            raise ProviderError(
                f"{self._name} request failed: {response.status_code}",
                code="idp_unavailable",
                response_body=response.text,
            )
        return response

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self._name} returned invalid JSON",
                code="oauth_error",
                response_body=response.text,
            ) from e
        if not isinstance(payload, dict):
            raise ProviderError(
                f"{self._name} returned an unexpected payload",
                code="oauth_error",
                response_body=response.text,
            )
        return payload
