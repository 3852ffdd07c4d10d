"""Unit tests for OAuth2IdentityProvider adapter."""

from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from socialauth.config import ProviderConfig
from socialauth.domain.auth.model.identity import AccessToken
from socialauth.domain.shared.error import ProviderError
from socialauth.infrastructure.auth.oauth2 import OAuth2IdentityProvider
from socialauth.infrastructure.auth.state import StateSigner

CALLBACK_URL = "http://testserver/auth/github/callback"
NONCE = "login-nonce"


def make_config(**overrides) -> ProviderConfig:
    values = {
        "client_id": "client-123",
        "client_secret": "s3cret",
        "scope": "read:user user:email",
        "authorize_url": "https://github.com/login/oauth/authorize",
        "token_url": "https://github.com/login/oauth/access_token",
        "identity_url": "https://api.github.com/user",
        "identity_fields": {"login": "username", "name": "fullname", "avatar_url": "pictureURL"},
    }
    values.update(overrides)
    return ProviderConfig(**values)


def make_response(status_code: int = 200, payload=None, text: str | None = None) -> MagicMock:
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    response.text = text if text is not None else str(payload)
    return response


@pytest.fixture
def signer() -> StateSigner:
    return StateSigner("test-secret-key-for-signing-min-32")


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock(spec=httpx.AsyncClient)


def make_adapter(client: AsyncMock, signer: StateSigner, **overrides) -> OAuth2IdentityProvider:
    return OAuth2IdentityProvider(
        name="github",
        config=make_config(**overrides),
        http_client=client,
        signer=signer,
        callback_url=CALLBACK_URL,
    )


class TestAuthorizationUrl:
    def test_contains_client_and_callback(self, client: AsyncMock, signer: StateSigner):
        adapter = make_adapter(client, signer, options={"allow_signup": "false"})

        url = urlparse(adapter.get_authorization_url(NONCE))
        params = parse_qs(url.query)

        assert f"{url.scheme}://{url.netloc}{url.path}" == "https://github.com/login/oauth/authorize"
        assert params["client_id"] == ["client-123"]
        assert params["response_type"] == ["code"]
        assert params["redirect_uri"] == [CALLBACK_URL]
        assert params["scope"] == ["read:user user:email"]
        assert params["allow_signup"] == ["false"]
        assert signer.verify(params["state"][0]) == ("github", NONCE)

    def test_omits_empty_scope(self, client: AsyncMock, signer: StateSigner):
        adapter = make_adapter(client, signer, scope="")

        params = parse_qs(urlparse(adapter.get_authorization_url(NONCE)).query)

        assert "scope" not in params


class TestGetAccessToken:
    @pytest.mark.asyncio
    async def test_exchanges_code(self, client: AsyncMock, signer: StateSigner):
        client.request.return_value = make_response(
            payload={"access_token": "gho_abc", "token_type": "bearer", "scope": "read:user", "expires_in": 3600}
        )
        adapter = make_adapter(client, signer)

        token = await adapter.get_access_token({"code": "abc", "state": signer.create("github", NONCE)}, NONCE)

        assert token.token == "gho_abc"
        assert token.expires_at is not None
        assert token.extra == {"token_type": "bearer", "scope": "read:user"}
        method, url = client.request.call_args.args
        assert (method, url) == ("POST", "https://github.com/login/oauth/access_token")
        assert client.request.call_args.kwargs["data"]["code"] == "abc"
        assert client.request.call_args.kwargs["data"]["redirect_uri"] == CALLBACK_URL

    @pytest.mark.asyncio
    async def test_provider_error_param(self, client: AsyncMock, signer: StateSigner):
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"error": "access_denied", "state": signer.create("github", NONCE)}, NONCE)

        assert exc_info.value.code == "authorization_denied"
        client.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_state_for_other_provider(self, client: AsyncMock, signer: StateSigner):
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"code": "abc", "state": signer.create("orcid", NONCE)}, NONCE)

        assert exc_info.value.code == "invalid_state"

    @pytest.mark.asyncio
    async def test_state_from_another_session(self, client: AsyncMock, signer: StateSigner):
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"code": "abc", "state": signer.create("github", "other-nonce")}, NONCE)

        assert exc_info.value.code == "invalid_state"
        client.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_session_without_nonce(self, client: AsyncMock, signer: StateSigner):
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"code": "abc", "state": signer.create("github", NONCE)}, None)

        assert exc_info.value.code == "invalid_state"
        client.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_state(self, client: AsyncMock, signer: StateSigner):
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"code": "abc"}, NONCE)

        assert exc_info.value.code == "invalid_state"

    @pytest.mark.asyncio
    async def test_missing_code(self, client: AsyncMock, signer: StateSigner):
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"state": signer.create("github", NONCE)}, NONCE)

        assert exc_info.value.code == "missing_code"

    @pytest.mark.asyncio
    async def test_token_endpoint_error_keeps_body(self, client: AsyncMock, signer: StateSigner):
        client.request.return_value = make_response(400, text='{"error": "bad_verification_code"}')
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"code": "abc", "state": signer.create("github", NONCE)}, NONCE)

        assert exc_info.value.response_body == '{"error": "bad_verification_code"}'

    @pytest.mark.asyncio
    async def test_response_without_access_token(self, client: AsyncMock, signer: StateSigner):
        client.request.return_value = make_response(payload={"error": "bad_verification_code"})
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"code": "abc", "state": signer.create("github", NONCE)}, NONCE)

        assert exc_info.value.code == "oauth_error"

    @pytest.mark.asyncio
    async def test_connection_error(self, client: AsyncMock, signer: StateSigner):
        client.request.side_effect = httpx.ConnectError("refused")
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_access_token({"code": "abc", "state": signer.create("github", NONCE)}, NONCE)

        assert exc_info.value.code == "idp_unavailable"


class TestGetIdentity:
    @pytest.mark.asyncio
    async def test_renames_provider_fields(self, client: AsyncMock, signer: StateSigner):
        client.request.return_value = make_response(
            payload={
                "id": 583231,
                "login": "octocat",
                "name": "The Octocat",
                "avatar_url": "https://avatars.example/1",
                "email": "octocat@github.com",
            }
        )
        adapter = make_adapter(client, signer)

        identity = await adapter.get_identity(AccessToken(token="gho_abc"))

        assert identity.id == "583231"
        assert identity.get("username") == "octocat"
        assert identity.get("fullname") == "The Octocat"
        assert identity.get("pictureURL") == "https://avatars.example/1"
        assert identity.get("email") == "octocat@github.com"
        kwargs = client.request.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer gho_abc"

    @pytest.mark.asyncio
    async def test_invalid_json(self, client: AsyncMock, signer: StateSigner):
        client.request.return_value = make_response(payload=ValueError("Invalid JSON"), text="<html>")
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_identity(AccessToken(token="gho_abc"))

        assert exc_info.value.response_body == "<html>"

    @pytest.mark.asyncio
    async def test_payload_without_id(self, client: AsyncMock, signer: StateSigner):
        client.request.return_value = make_response(payload={"login": "octocat"})
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError):
            await adapter.get_identity(AccessToken(token="gho_abc"))

    @pytest.mark.asyncio
    async def test_unauthorized(self, client: AsyncMock, signer: StateSigner):
        client.request.return_value = make_response(401, text='{"message": "Bad credentials"}')
        adapter = make_adapter(client, signer)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.get_identity(AccessToken(token="expired"))

        assert exc_info.value.response_body == '{"message": "Bad credentials"}'
