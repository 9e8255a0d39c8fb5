"""
Session helpers for Keystone logins.

The session lifetime follows the lifetime of the Keystone token the user
logged in with. It is set once, on the first successful login of a
session, and left alone on later requests that already carry a user.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, MutableMapping, Optional

from .models import Identity, SessionUser

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"
SESSION_EXPIRES_KEY = "expires_at"
SESSION_FLASH_KEY = "flash"


def compute_session_expiry(
    existing_user: Optional[Any],
    token_expiry: Optional[datetime],
    now: Optional[datetime] = None
) -> Optional[timedelta]:
    """
    Work out how long a freshly authenticated session should live.

    Args:
        existing_user: User already attached to the request, if any
        token_expiry: Expiry timestamp of the newly issued token
        now: Current time, defaults to the current UTC time

    Returns:
        Optional[timedelta]: Remaining token lifetime, never negative.
        None when the request already had a user or the token carries
        no expiry, meaning the session lifetime must not be touched.
    """
    if existing_user or token_expiry is None:
        return None
    now = now or datetime.now(timezone.utc)
    return max(token_expiry - now, timedelta(0))


def session_expired(session: MutableMapping[str, Any], now: Optional[datetime] = None) -> bool:
    """Check the expiry recorded by ``session_verify``."""
    expires_at = session.get(SESSION_EXPIRES_KEY)
    if not expires_at:
        return False
    now = now or datetime.now(timezone.utc)
    return now >= datetime.fromisoformat(expires_at)


def clear_session_user(session: MutableMapping[str, Any]) -> None:
    session.pop(SESSION_USER_KEY, None)
    session.pop(SESSION_EXPIRES_KEY, None)


def session_verify(request: Any, identity: Identity) -> SessionUser:
    """
    Verify callback used by the application.

    Returns the user already on the request unchanged, so a repeated login
    through an authenticated session keeps its original lifetime.
    Otherwise builds a SessionUser from the identity and records the
    token's expiry in the session.

    Args:
        request: LoginRequest exposing ``user`` and ``session``
        identity: Identity returned by Keystone

    Returns:
        SessionUser: The user to authenticate the request as
    """
    if request.user:
        logger.debug("Request already authenticated, keeping session user")
        return request.user

    now = datetime.now(timezone.utc)
    lifetime = compute_session_expiry(request.user, identity.token.expires, now)
    if lifetime is not None:
        request.session[SESSION_EXPIRES_KEY] = (now + lifetime).isoformat()
    else:
        request.session.pop(SESSION_EXPIRES_KEY, None)

    return SessionUser.from_identity(identity)


def flash(session: MutableMapping[str, Any], message: str) -> None:
    """Queue a message for the next request of this session."""
    session.setdefault(SESSION_FLASH_KEY, []).append(message)


def pop_flashes(session: MutableMapping[str, Any]) -> List[str]:
    return session.pop(SESSION_FLASH_KEY, [])
