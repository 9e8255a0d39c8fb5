"""
Custom exceptions for Keystone authentication.

This module defines specific exception types for the ways a call to the
identity service can go wrong. The strategy turns all of them into a
failed login; the concrete type lets the host tell a rejected password
apart from an unreachable identity service.
"""

from typing import Optional


class AuthenticationError(Exception):
    """
    Base exception for authentication failures.

    Carries a human readable message and a stable error code that the
    host can put in its response body.
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "authentication_failed"


class IdentityServiceError(AuthenticationError):
    """
    Exception raised when the identity service answers with an error.

    This includes scenarios like:
    - Unexpected HTTP status codes
    - Response bodies that are not JSON
    - JSON documents without an ``access`` section
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message, error_code or "identity_service_error")
        self.status_code = status_code


class CredentialsRejectedError(IdentityServiceError):
    """
    Exception raised when Keystone declines the submitted credentials.

    Keystone answers 401 for a wrong password and 403 for disabled
    users or tenants the user does not belong to.
    """

    def __init__(self, message: str, status_code: Optional[int] = 401):
        super().__init__(message, status_code, "credentials_rejected")


class IdentityConnectionError(IdentityServiceError):
    """
    Exception raised when the identity service cannot be reached.

    This includes network failures, DNS errors and timeouts.
    """

    def __init__(self, message: str, connection_error: Optional[str] = None):
        super().__init__(message, None, "identity_service_unavailable")
        self.connection_error = connection_error
