"""
Keystone identity client.

This module exchanges a username and password for a token using the
Keystone v2.0 ``POST /v2.0/tokens`` call.
"""

import logging
from typing import Optional

import httpx

from .models import AuthRequestContext, Identity
from .exceptions import (
    CredentialsRejectedError,
    IdentityConnectionError,
    IdentityServiceError
)

logger = logging.getLogger(__name__)


class KeystoneIdentityClient:
    """
    Client for one token request against a Keystone identity endpoint.

    A client is created from an AuthRequestContext for each login attempt.
    After a successful ``auth()`` the resolved identity is available as
    ``client.identity``.
    """

    def __init__(
        self,
        context: AuthRequestContext,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the identity client.

        Args:
            context: Credentials and endpoint for this request
            http_client: Shared HTTP client; one is created (and closed by
                ``close()``) when omitted
        """
        self.context = context
        self.identity: Optional[Identity] = None

        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(context.timeout),
            headers={
                'User-Agent': context.user_agent,
                'Accept': 'application/json'
            }
        )

    async def auth(self) -> Identity:
        """
        Request a token for the context's credentials.

        Returns:
            Identity: The token, user and service catalog issued by Keystone

        Raises:
            CredentialsRejectedError: If Keystone declines the credentials
            IdentityConnectionError: If Keystone cannot be reached in time
            IdentityServiceError: If Keystone answers with anything else,
                or the endpoint is not a usable URL
        """
        logger.debug(
            "Requesting Keystone token",
            extra={
                "tokens_url": self.context.tokens_url,
                "region": self.context.region,
                "tenant_id": self.context.tenant_id or None
            }
        )

        try:
            response = await self.http_client.post(
                self.context.tokens_url,
                json=self.context.to_auth_payload()
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during Keystone authentication: {e}")
            raise IdentityConnectionError(
                f"Unable to connect to identity service: {str(e)}",
                str(e)
            )
        except httpx.InvalidURL as e:
            logger.error(f"Invalid Keystone endpoint {self.context.auth_url!r}: {e}")
            raise IdentityServiceError(
                f"Invalid identity endpoint: {str(e)}",
                error_code="invalid_identity_endpoint"
            )

        if response.status_code in (401, 403):
            error_detail = self._parse_error_response(response)
            raise CredentialsRejectedError(error_detail, response.status_code)

        if response.status_code not in (200, 203):
            error_detail = self._parse_error_response(response)
            raise IdentityServiceError(
                f"Identity service error: {error_detail}",
                response.status_code
            )

        try:
            self.identity = Identity.from_response(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise IdentityServiceError(
                f"Malformed identity response: {str(e)}",
                response.status_code
            )

        logger.info(
            "Keystone authentication successful",
            extra={
                "user_id": self.identity.user.id,
                "username": self.identity.user.name,
                "token_expires": str(self.identity.token.expires)
            }
        )

        return self.identity

    def _parse_error_response(self, response: httpx.Response) -> str:
        """
        Parse an error response from Keystone.

        Keystone v2.0 wraps errors as ``{"unauthorized": {"code": 401,
        "message": "..."}}``; the key varies with the error kind.

        Args:
            response: HTTP response from Keystone

        Returns:
            str: Error description
        """
        try:
            error_data = response.json()
            for detail in error_data.values():
                if isinstance(detail, dict) and detail.get("message"):
                    return detail["message"]
            return f"HTTP {response.status_code}"
        except Exception:
            return f"HTTP {response.status_code}: {response.text}"

    async def close(self) -> None:
        """Clean up resources."""
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
