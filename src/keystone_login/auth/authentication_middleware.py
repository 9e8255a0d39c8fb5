"""
Session user middleware for FastAPI.

This module provides the middleware that restores the logged-in user from
the session cookie, and the dependencies route handlers use to read it.
"""

import logging
from typing import Callable, Optional

from fastapi import HTTPException, Request, Response, status
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from .models import SessionUser
from .session import SESSION_USER_KEY, clear_session_user, session_expired

logger = logging.getLogger(__name__)


class SessionUserMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware that attaches the session user to each request.

    This middleware:
    1. Reads the stored user from the session
    2. Drops it once the session has outlived its Keystone token
    3. Sets ``request.state.user`` for handlers and the login strategy

    Starlette's SessionMiddleware must run outside of this one.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process incoming requests and restore the session user.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in the chain

        Returns:
            Response: HTTP response
        """
        user = self._load_user(request)

        request.state.user = user
        request.state.authenticated = user is not None

        response = await call_next(request)

        if user is not None:
            response.headers["X-Authenticated"] = "true"

        return response

    def _load_user(self, request: Request) -> Optional[SessionUser]:
        session = request.scope.get("session")
        if not session or SESSION_USER_KEY not in session:
            return None

        try:
            expired = session_expired(session)
        except (ValueError, TypeError):
            logger.warning("Discarding session with unreadable expiry")
            clear_session_user(session)
            return None

        if expired:
            logger.info(
                "Session expired with its Keystone token",
                extra={"path": request.url.path}
            )
            clear_session_user(session)
            return None

        try:
            return SessionUser.from_session(session[SESSION_USER_KEY])
        except ValidationError as e:
            logger.warning(
                "Discarding malformed session user",
                extra={"error": str(e)}
            )
            clear_session_user(session)
            return None


def get_current_user(request: Request) -> Optional[SessionUser]:
    """
    Dependency function to get current authenticated user.

    Args:
        request: FastAPI request object

    Returns:
        Optional[SessionUser]: Current user if authenticated
    """
    return getattr(request.state, 'user', None)


def require_authentication(request: Request) -> SessionUser:
    """
    Dependency function that requires authentication.

    Args:
        request: FastAPI request object

    Returns:
        SessionUser: Current user

    Raises:
        HTTPException: If request is not authenticated
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    return user
