"""
Login request adapter.

The strategy only looks at plain mappings. LoginRequest reads them out of
a Starlette request once, so the strategy never has to await the body.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, MutableMapping, Optional

from fastapi import Request

from .lookup import nest_fields

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@dataclass
class LoginRequest:
    """Request data a strategy authenticates against."""
    body: Optional[Dict[str, Any]] = None
    query: Optional[Dict[str, Any]] = None
    user: Optional[Any] = None
    session: MutableMapping[str, Any] = field(default_factory=dict)

    @classmethod
    async def from_request(cls, request: Request) -> "LoginRequest":
        """
        Build a LoginRequest from an incoming HTTP request.

        Form bodies and query strings are nested by bracket notation.
        JSON bodies are used as they are when they decode to an object.

        Args:
            request: Incoming HTTP request

        Returns:
            LoginRequest: Snapshot of the request's login data
        """
        content_type = request.headers.get("content-type", "")
        body = None

        if content_type.startswith("application/json"):
            try:
                data = await request.json()
            except ValueError:
                data = None
            if isinstance(data, dict):
                body = data
        elif content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            body = nest_fields(form.multi_items())

        return cls(
            body=body,
            query=nest_fields(request.query_params.multi_items()),
            user=getattr(request.state, "user", None),
            session=request.session if "session" in request.scope else {},
        )
