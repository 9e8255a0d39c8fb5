"""
Strategy interface.

A strategy authenticates one request and reports a single Outcome. The
host picks the strategy by ``name`` and maps the outcome onto a response.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, Field

from .models import Outcome


class AuthenticateOptions(BaseModel):
    """Per-call options the host passes to ``authenticate``."""

    bad_request_message: Optional[str] = Field(
        None,
        description="Replaces the default message of locally rejected requests"
    )


class Strategy(ABC):
    """Base class for request authentication strategies."""

    name: str = ""

    @abstractmethod
    async def authenticate(
        self,
        request: Any,
        options: Optional[AuthenticateOptions] = None
    ) -> Outcome:
        """
        Authenticate a request.

        Args:
            request: Host request exposing ``body`` and ``query`` mappings
            options: Per-call options

        Returns:
            Outcome: Success, Fail or Error, exactly one per call
        """
