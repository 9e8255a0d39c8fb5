"""
Test suite for the Keystone identity client.

The HTTP layer is replaced either by an AsyncMock or by an httpx
MockTransport so no real identity service is needed.
"""

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from keystone_login.auth.exceptions import (
    CredentialsRejectedError,
    IdentityConnectionError,
    IdentityServiceError
)
from keystone_login.auth.identity_client import KeystoneIdentityClient
from keystone_login.auth.models import AuthRequestContext


@pytest.fixture
def context():
    """Create a test identity request context."""
    return AuthRequestContext(
        username="bob",
        password="secret",
        auth_url="https://identity.example.com/",
        region="ORD"
    )


def mock_response(status_code, body=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = json.dumps(body)
    return response


class TestAuthRequestContext:
    """Test the per-request identity context."""

    def test_tokens_url(self, context):
        assert context.tokens_url == "https://identity.example.com/v2.0/tokens"

    def test_tokens_url_with_version(self):
        context = AuthRequestContext(
            username="bob",
            password="secret",
            auth_url="https://identity.example.com/v2.0"
        )
        assert context.tokens_url == "https://identity.example.com/v2.0/tokens"

    def test_payload_without_tenant(self, context):
        assert context.to_auth_payload() == {
            "auth": {
                "passwordCredentials": {"username": "bob", "password": "secret"}
            }
        }

    def test_payload_with_tenant(self):
        context = AuthRequestContext(
            username="bob",
            password="secret",
            auth_url="https://identity.example.com",
            tenant_id="tenant-1"
        )
        assert context.to_auth_payload()["auth"]["tenantId"] == "tenant-1"

    def test_password_not_in_repr(self, context):
        assert "secret" not in repr(context)


class TestKeystoneIdentityClient:
    """Test token requests against Keystone."""

    @pytest.mark.asyncio
    async def test_auth_success(self, context, access_document):
        mock_http_client = AsyncMock()
        mock_http_client.post.return_value = mock_response(200, access_document)

        client = KeystoneIdentityClient(context, http_client=mock_http_client)
        identity = await client.auth()

        assert client.identity is identity
        assert identity.token.id == "token-123"
        assert identity.user.name == "bob"
        assert identity.raw == access_document
        mock_http_client.post.assert_called_once_with(
            "https://identity.example.com/v2.0/tokens",
            json=context.to_auth_payload()
        )

        await client.close()

    @pytest.mark.asyncio
    async def test_auth_non_authoritative_success(self, context, access_document):
        mock_http_client = AsyncMock()
        mock_http_client.post.return_value = mock_response(203, access_document)

        client = KeystoneIdentityClient(context, http_client=mock_http_client)

        identity = await client.auth()
        assert identity.token.id == "token-123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 403])
    async def test_auth_rejected(self, context, status_code):
        mock_http_client = AsyncMock()
        mock_http_client.post.return_value = mock_response(
            status_code,
            {"unauthorized": {"code": status_code, "message": "Username or api key is invalid."}}
        )

        client = KeystoneIdentityClient(context, http_client=mock_http_client)

        with pytest.raises(CredentialsRejectedError) as exc_info:
            await client.auth()

        assert exc_info.value.message == "Username or api key is invalid."
        assert exc_info.value.status_code == status_code
        assert exc_info.value.error_code == "credentials_rejected"
        assert client.identity is None

    @pytest.mark.asyncio
    async def test_auth_server_error(self, context):
        mock_http_client = AsyncMock()
        mock_http_client.post.return_value = mock_response(
            500,
            {"identityFault": {"code": 500, "message": "Internal error"}}
        )

        client = KeystoneIdentityClient(context, http_client=mock_http_client)

        with pytest.raises(IdentityServiceError) as exc_info:
            await client.auth()

        assert not isinstance(exc_info.value, CredentialsRejectedError)
        assert exc_info.value.status_code == 500
        assert "Internal error" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_auth_error_body_not_json(self, context):
        response = Mock()
        response.status_code = 502
        response.json.side_effect = ValueError("not json")
        response.text = "Bad Gateway"

        mock_http_client = AsyncMock()
        mock_http_client.post.return_value = response

        client = KeystoneIdentityClient(context, http_client=mock_http_client)

        with pytest.raises(IdentityServiceError, match="HTTP 502: Bad Gateway"):
            await client.auth()

    @pytest.mark.asyncio
    async def test_auth_connection_failure(self, context):
        mock_http_client = AsyncMock()
        mock_http_client.post.side_effect = httpx.HTTPError("Connection failed")

        client = KeystoneIdentityClient(context, http_client=mock_http_client)

        with pytest.raises(IdentityConnectionError) as exc_info:
            await client.auth()

        assert exc_info.value.connection_error == "Connection failed"
        assert exc_info.value.error_code == "identity_service_unavailable"

    @pytest.mark.asyncio
    async def test_auth_timeout(self, context):
        mock_http_client = AsyncMock()
        mock_http_client.post.side_effect = httpx.ReadTimeout("timed out")

        client = KeystoneIdentityClient(context, http_client=mock_http_client)

        with pytest.raises(IdentityConnectionError):
            await client.auth()

    @pytest.mark.asyncio
    async def test_auth_missing_access(self, context):
        mock_http_client = AsyncMock()
        mock_http_client.post.return_value = mock_response(200, {"token": {}})

        client = KeystoneIdentityClient(context, http_client=mock_http_client)

        with pytest.raises(IdentityServiceError, match="Malformed identity response"):
            await client.auth()

    @pytest.mark.asyncio
    async def test_auth_over_transport(self, context, access_document):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=access_document)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            async with KeystoneIdentityClient(context, http_client=http_client) as client:
                identity = await client.auth()

        assert seen["url"] == "https://identity.example.com/v2.0/tokens"
        assert seen["body"]["auth"]["passwordCredentials"] == {
            "username": "bob",
            "password": "secret"
        }
        assert identity.endpoint_url("object-store", region="ORD") == "https://ord.files.example.com/v1/acme"

    @pytest.mark.asyncio
    async def test_auth_invalid_endpoint(self):
        context = AuthRequestContext(
            username="bob",
            password="secret",
            auth_url="https://identity\x00.example.com"
        )

        async with KeystoneIdentityClient(context) as client:
            with pytest.raises(IdentityServiceError) as exc_info:
                await client.auth()

        assert exc_info.value.error_code == "invalid_identity_endpoint"
        assert exc_info.value.status_code is None
        assert not isinstance(exc_info.value, IdentityConnectionError)
        assert client.identity is None

    @pytest.mark.asyncio
    async def test_close_leaves_shared_client_open(self, context):
        mock_http_client = AsyncMock()

        client = KeystoneIdentityClient(context, http_client=mock_http_client)
        await client.close()

        mock_http_client.aclose.assert_not_called()

    @pytest.mark.asyncio
    async def test_close_owned_client(self, context):
        client = KeystoneIdentityClient(context)

        assert client.http_client.headers["User-Agent"] == context.user_agent
        await client.close()

        assert client.http_client.is_closed
