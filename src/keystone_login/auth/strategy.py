"""
Keystone authentication strategy.

This module authenticates login form submissions against a Keystone
identity endpoint and reports the result as an Outcome.
"""

import inspect
from typing import Any, Callable, Optional, Tuple

from keystone_login.core.logging import get_logger

from .base import AuthenticateOptions, Strategy
from .exceptions import IdentityServiceError
from .identity_client import KeystoneIdentityClient
from .lookup import lookup
from .models import (
    AuthRequestContext,
    Credentials,
    Error,
    Fail,
    Outcome,
    StrategyConfig,
    Success
)

logger = get_logger(__name__)

MISSING_CREDENTIALS = "Missing credentials"
MISSING_ENDPOINT = "Missing Identity Endpoint"
TOKEN_NOT_GENERATED = "Auth token not generated"

VerifyCallback = Callable[..., Any]
IdentityClientFactory = Callable[[AuthRequestContext], Any]


class KeystoneStrategy(Strategy):
    """
    Authenticate requests against a Keystone identity endpoint.

    The username and password are read from the request body, falling
    back to the query string. They are exchanged for a token and the
    resulting identity is handed to the application's ``verify`` callback,
    which decides what user object the request is authenticated as.

    The verify callback may be a plain function or a coroutine function.
    It receives ``(identity)``, or ``(request, identity)`` when
    ``pass_req_to_callback`` is set, and returns either a user or a
    ``(user, info)`` tuple. A falsy user rejects the login. Raising marks
    the request as errored.

    Example:
        strategy = KeystoneStrategy(
            StrategyConfig(
                auth_url="https://identity.api.rackspacecloud.com",
                region="ord",
                pass_req_to_callback=True
            ),
            verify=lambda request, identity: request.user or SessionUser.from_identity(identity)
        )
        outcome = await strategy.authenticate(login_request)
    """

    name = "keystone"

    def __init__(
        self,
        config: Optional[StrategyConfig] = None,
        verify: Optional[VerifyCallback] = None,
        client_factory: IdentityClientFactory = KeystoneIdentityClient
    ):
        """
        Initialize the strategy.

        Args:
            config: Strategy configuration, defaults apply when omitted
            verify: Callback mapping an identity to an application user
            client_factory: Builds an identity client for a request context
        """
        self.config = config or StrategyConfig()
        self._verify = verify
        self._client_factory = client_factory

        logger.info(
            "Keystone strategy initialized",
            auth_url=self.config.auth_url or None,
            region=self.config.region,
            pass_req_to_callback=self.config.pass_req_to_callback,
            has_verify=verify is not None
        )

    async def authenticate(
        self,
        request: Any,
        options: Optional[AuthenticateOptions] = None
    ) -> Outcome:
        """
        Authenticate request based on the contents of a form submission.

        Args:
            request: Request exposing ``body`` and ``query`` mappings
            options: Per-call options

        Returns:
            Outcome: Success, Fail or Error
        """
        options = options or AuthenticateOptions()

        credentials = self._extract_credentials(request)
        if credentials is None:
            return Fail({"message": options.bad_request_message or MISSING_CREDENTIALS}, 400)

        if not self.config.auth_url:
            logger.warning("Login attempted without a configured identity endpoint")
            return Fail({"message": options.bad_request_message or MISSING_ENDPOINT}, 400)

        context = AuthRequestContext(
            username=credentials.username,
            password=credentials.password,
            auth_url=self.config.auth_url,
            region=self.config.region,
            tenant_id=self.config.tenant_id,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent
        )

        try:
            client = self._client_factory(context)
            try:
                await client.auth()
            finally:
                await client.close()
        except IdentityServiceError as e:
            logger.warning(
                "Keystone authentication failed",
                username=credentials.username,
                error_code=e.error_code,
                status_code=e.status_code
            )
            return Fail(e)
        except Exception as e:
            logger.error("Unexpected error calling identity service", error=str(e), exc_info=True)
            return Error(e)

        try:
            return await self._complete(request, client.identity)
        except Exception as e:
            logger.error("Unexpected error completing Keystone authentication", error=str(e), exc_info=True)
            return Error(e)

    def _extract_credentials(self, request: Any) -> Optional[Credentials]:
        """
        Pull the username and password out of the request.

        Returns:
            Optional[Credentials]: None when either value is missing or empty
        """
        body = getattr(request, "body", None)
        query = getattr(request, "query", None)

        username = lookup(body, self.config.username_field) or lookup(query, self.config.username_field)
        password = lookup(body, self.config.password_field) or lookup(query, self.config.password_field)

        if not username or not password:
            return None
        return Credentials(username=str(username), password=str(password))

    async def _complete(self, request: Any, identity: Any) -> Outcome:
        """
        Turn a resolved identity into an outcome.

        Runs the verify callback when one is configured.
        """
        if identity is None or not identity.token.id:
            return Fail(TOKEN_NOT_GENERATED)

        if self._verify is None:
            return Success(identity)

        if self.config.pass_req_to_callback:
            result = self._verify(request, identity)
        else:
            result = self._verify(identity)
        if inspect.isawaitable(result):
            result = await result

        user, info = _unpack_verified(result)
        if not user:
            return Fail(info)
        return Success(user, info)


def _unpack_verified(result: Any) -> Tuple[Any, Any]:
    # A tuple is always read as (user, info)
    if isinstance(result, tuple):
        if len(result) != 2:
            raise ValueError("verify callback must return a user or a (user, info) tuple")
        return result
    return result, None
