"""
Authentication models package.

The models are organized into focused modules:
- strategy_config: construction-time strategy configuration
- credentials: per-request credentials and identity request context
- identity: parsed Keystone token response
- outcome: the three terminal outcomes of an authentication attempt
- session_user: the user the application keeps in its session

Example Usage:
    from keystone_login.auth.models import StrategyConfig, Success, Fail

    config = StrategyConfig(
        auth_url="https://identity.example.com",
        region="ord"
    )
"""

from .strategy_config import StrategyConfig
from .credentials import Credentials, AuthRequestContext
from .identity import Identity, IdentityUser, Token
from .outcome import Outcome, Success, Fail, Error
from .session_user import SessionUser

__all__ = [
    # Configuration
    "StrategyConfig",

    # Per-request values
    "Credentials",
    "AuthRequestContext",

    # Identity service results
    "Identity",
    "IdentityUser",
    "Token",

    # Outcomes
    "Outcome",
    "Success",
    "Fail",
    "Error",

    # Application user
    "SessionUser",
]
