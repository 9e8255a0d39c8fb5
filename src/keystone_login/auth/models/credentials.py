"""
Per-request credential models.

Credentials and AuthRequestContext are built fresh for every login
attempt and dropped once the attempt has an outcome. Neither is ever
persisted and the password never appears in their repr.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Username and password pulled out of a login request."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, repr=False)


class AuthRequestContext(BaseModel):
    """
    Everything the identity client needs for one token request.

    Example:
        context = AuthRequestContext(
            username="bob",
            password="secret",
            auth_url="https://identity.example.com",
            region="ord"
        )
        context.tokens_url  # https://identity.example.com/v2.0/tokens
    """

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(..., repr=False)
    auth_url: str
    region: str = ""
    tenant_id: str = ""
    timeout: float = 10.0
    user_agent: str = "Keystone-Login/1.0"

    @property
    def tokens_url(self) -> str:
        """
        Get the Keystone v2.0 token endpoint.

        Accepts an ``auth_url`` with or without a trailing ``/v2.0``.
        """
        base = self.auth_url.rstrip("/")
        if base.endswith("/v2.0"):
            return f"{base}/tokens"
        return f"{base}/v2.0/tokens"

    def to_auth_payload(self) -> Dict[str, Any]:
        """Build the JSON body for ``POST /v2.0/tokens``."""
        auth: Dict[str, Any] = {
            "passwordCredentials": {
                "username": self.username,
                "password": self.password,
            }
        }
        if self.tenant_id:
            auth["tenantId"] = self.tenant_id
        return {"auth": auth}
