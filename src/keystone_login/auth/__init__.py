"""
Authentication module for Keystone Login.

This module provides the Keystone password strategy, the identity client
it talks to Keystone with, and the session plumbing the application uses
to remember a logged-in user.
"""

from .authentication_middleware import SessionUserMiddleware
from .base import AuthenticateOptions, Strategy
from .identity_client import KeystoneIdentityClient
from .lookup import lookup, nest_fields
from .request import LoginRequest
from .session import compute_session_expiry, session_verify
from .strategy import KeystoneStrategy
from .models import (
    StrategyConfig,
    Identity,
    SessionUser,
    Outcome,
    Success,
    Fail,
    Error
)
from .exceptions import (
    AuthenticationError,
    IdentityServiceError,
    CredentialsRejectedError,
    IdentityConnectionError
)

__all__ = [
    "SessionUserMiddleware",
    "AuthenticateOptions",
    "Strategy",
    "KeystoneIdentityClient",
    "lookup",
    "nest_fields",
    "LoginRequest",
    "compute_session_expiry",
    "session_verify",
    "KeystoneStrategy",
    "StrategyConfig",
    "Identity",
    "SessionUser",
    "Outcome",
    "Success",
    "Fail",
    "Error",
    "AuthenticationError",
    "IdentityServiceError",
    "CredentialsRejectedError",
    "IdentityConnectionError"
]
