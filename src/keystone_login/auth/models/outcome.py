"""
Authentication outcomes.

Every call to a strategy's ``authenticate`` ends in exactly one of these.
The host checks the type with ``isinstance`` and builds its response.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Success:
    """The request is authenticated as ``user``."""
    user: Any
    info: Any = None


@dataclass(frozen=True)
class Fail:
    """The login was rejected. ``status_code`` is None when the host should pick one."""
    info: Any = None
    status_code: Optional[int] = None

    @property
    def message(self) -> Optional[str]:
        """Best effort human readable reason."""
        if self.info is None:
            return None
        if isinstance(self.info, Mapping):
            return self.info.get("message")
        if isinstance(self.info, Exception):
            return getattr(self.info, "message", None) or str(self.info)
        return str(self.info)


@dataclass(frozen=True)
class Error:
    """Something unexpected broke while authenticating."""
    error: Exception


Outcome = Union[Success, Fail, Error]
