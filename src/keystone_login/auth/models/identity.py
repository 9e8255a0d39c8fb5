"""
Identity model.

This module contains the models for a successful Keystone v2.0 token
response: the issued token, the user it was issued to, and the service
catalog that came with it.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class Token(BaseModel):
    """Token section of a Keystone ``access`` document."""

    id: Optional[str] = Field(None, description="Token id, sent as X-Auth-Token")
    expires: Optional[datetime] = Field(None, description="When the token stops being accepted")
    tenant: Optional[Dict[str, Any]] = Field(None, description="Tenant the token is scoped to")

    @field_validator("expires")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Keystone timestamps without an offset are UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class IdentityUser(BaseModel):
    """User section of a Keystone ``access`` document."""

    id: Optional[str] = None
    name: Optional[str] = None
    roles: List[Dict[str, Any]] = Field(default_factory=list)


class Identity(BaseModel):
    """
    Result of a successful token exchange.

    The service catalog is passed through untouched. ``raw`` keeps the
    full response document for callers that need fields this model does
    not surface.

    Example:
        identity = Identity.from_response(response.json())
        identity.token.id
        identity.endpoint_url("object-store", region="ORD")
    """

    token: Token = Field(default_factory=Token)
    user: IdentityUser = Field(default_factory=IdentityUser)
    service_catalog: List[Dict[str, Any]] = Field(default_factory=list)
    raw: Dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, document: Dict[str, Any]) -> "Identity":
        """
        Create an Identity from a ``POST /v2.0/tokens`` response body.

        Args:
            document: Decoded JSON body holding an ``access`` section

        Returns:
            Identity: Parsed identity

        Raises:
            KeyError: If the document has no ``access`` section
        """
        access = document["access"]
        return cls(
            token=Token.model_validate(access.get("token") or {}),
            user=IdentityUser.model_validate(access.get("user") or {}),
            service_catalog=access.get("serviceCatalog") or [],
            raw=document,
        )

    def endpoint_url(
        self,
        service_type: str,
        region: Optional[str] = None,
        interface: str = "publicURL"
    ) -> Optional[str]:
        """Resolve an endpoint URL from this identity's service catalog."""
        return resolve_endpoint(self.service_catalog, service_type, region, interface)


def resolve_endpoint(
    service_catalog: List[Dict[str, Any]],
    service_type: str,
    region: Optional[str] = None,
    interface: str = "publicURL"
) -> Optional[str]:
    """
    Resolve an endpoint URL from a service catalog.

    Endpoints in ``region`` are matched case-insensitively. Endpoints that
    carry no region (global services such as identity) match any region.

    Args:
        service_catalog: Catalog as returned by Keystone
        service_type: Catalog type, e.g. ``compute`` or ``object-store``
        region: Region to match; any region when empty
        interface: ``publicURL``, ``internalURL`` or ``adminURL``

    Returns:
        Optional[str]: Endpoint URL, or None when nothing matches
    """
    for service in service_catalog:
        if service.get("type") != service_type:
            continue
        for endpoint in service.get("endpoints") or []:
            endpoint_region = endpoint.get("region")
            if region and endpoint_region and endpoint_region.lower() != region.lower():
                continue
            url = endpoint.get(interface)
            if url:
                return url
    return None
