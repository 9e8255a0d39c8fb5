"""
Session user model.

This module contains the SessionUser model, the subset of a Keystone
identity that the application keeps in its session cookie.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .identity import Identity, resolve_endpoint


class SessionUser(BaseModel):
    """
    Authenticated user as stored in the session.

    Example:
        user = SessionUser.from_identity(identity)
        request.session["user"] = user.to_session()
    """

    id: str = Field(..., description="Keystone user id")
    token: str = Field(..., repr=False, description="Keystone token id")
    username: Optional[str] = Field(None, description="Keystone user name")
    service_catalog: List[Dict[str, Any]] = Field(
        default_factory=list,
        repr=False,
        description="Service catalog issued with the token"
    )
    token_expires_at: Optional[datetime] = Field(
        None,
        description="When the underlying token expires"
    )

    @classmethod
    def from_identity(cls, identity: Identity) -> "SessionUser":
        """Create a SessionUser from a freshly issued identity."""
        return cls(
            id=identity.user.id or "",
            token=identity.token.id or "",
            username=identity.user.name,
            service_catalog=identity.service_catalog,
            token_expires_at=identity.token.expires,
        )

    @classmethod
    def from_session(cls, data: Dict[str, Any]) -> "SessionUser":
        return cls.model_validate(data)

    def to_session(self) -> Dict[str, Any]:
        """Serialise for a JSON session cookie."""
        return self.model_dump(mode="json")

    def endpoint_url(
        self,
        service_type: str,
        region: Optional[str] = None,
        interface: str = "publicURL"
    ) -> Optional[str]:
        return resolve_endpoint(self.service_catalog, service_type, region, interface)

    def to_dict(self) -> dict:
        """
        Public view of the user.

        Leaves out the token and the service catalog.
        """
        return {
            "id": self.id,
            "username": self.username,
            "token_expires_at": self.token_expires_at.isoformat() if self.token_expires_at else None,
        }
