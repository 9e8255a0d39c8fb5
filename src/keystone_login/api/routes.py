"""
Keystone Login API Routes
Defines the login, logout and account endpoints around the Keystone strategy
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from keystone_login.auth.authentication_middleware import require_authentication
from keystone_login.auth.exceptions import AuthenticationError, IdentityConnectionError
from keystone_login.auth.models import Fail, SessionUser, Success
from keystone_login.auth.request import LoginRequest
from keystone_login.auth.session import (
    SESSION_USER_KEY,
    clear_session_user,
    flash,
    pop_flashes,
    session_verify
)
from keystone_login.auth.strategy import KeystoneStrategy
from keystone_login.core.config import Settings

logger = logging.getLogger(__name__)

# Create API router
router = APIRouter()


def build_strategy(settings: Settings) -> KeystoneStrategy:
    """
    Build the application's Keystone strategy from settings
    The verify callback needs the request, so it is always passed along
    """
    return KeystoneStrategy(
        settings.get_strategy_config(pass_req_to_callback=True),
        verify=session_verify
    )


def get_app_settings(request: Request) -> Settings:
    """Dependency injection for the settings the application was created with"""
    return request.app.state.settings


def get_strategy(request: Request) -> KeystoneStrategy:
    """Dependency injection for the application's Keystone strategy"""
    return request.app.state.strategy


@router.get("/health",
           summary="Health Check",
           description="Check if the service is running and healthy")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Health check endpoint with basic system information"""
    return {
        "status": "healthy",
        "service": "keystone-login",
        "version": "0.1.0",
        "identity_endpoint_configured": bool(settings.KEYSTONE_AUTH_URL),
        "environment": "development" if settings.DEBUG else "production"
    }


@router.get("/login",
           summary="Login Messages",
           description="Return and clear the messages left by failed logins")
async def login_messages(request: Request):
    return {
        "authenticated": getattr(request.state, "user", None) is not None,
        "messages": pop_flashes(request.session)
    }


@router.post("/login",
            summary="Log In",
            description="Authenticate a username and password against Keystone")
async def login(
    request: Request,
    strategy: KeystoneStrategy = Depends(get_strategy)
):
    """
    Authenticate the submitted credentials.

    A rejected login answers with the status the strategy chose, 401 by
    default, or 503 when Keystone could not be reached. Unexpected errors
    propagate to the generic error handler.
    """
    login_request = await LoginRequest.from_request(request)
    outcome = await strategy.authenticate(login_request)

    if isinstance(outcome, Success):
        user: SessionUser = outcome.user
        request.session[SESSION_USER_KEY] = user.to_session()
        logger.info(
            "User logged in",
            extra={"user_id": user.id, "username": user.username}
        )
        return {"authenticated": True, "user": user.to_dict()}

    if isinstance(outcome, Fail):
        return _failure_response(request, outcome)

    raise outcome.error


@router.post("/logout",
            summary="Log Out",
            description="Forget the session user")
async def logout(request: Request):
    clear_session_user(request.session)
    return {"authenticated": False}


@router.get("/account",
           summary="Current Account",
           description="Return the logged-in user")
async def account(user: SessionUser = Depends(require_authentication)):
    return user.to_dict()


@router.get("/account/endpoints/{service_type}",
           summary="Service Endpoint",
           description="Resolve an endpoint from the user's service catalog")
async def account_endpoint(
    service_type: str,
    interface: str = "publicURL",
    user: SessionUser = Depends(require_authentication),
    settings: Settings = Depends(get_app_settings)
):
    url = user.endpoint_url(service_type, settings.KEYSTONE_REGION, interface)
    if url is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {service_type} endpoint in the service catalog"
        )
    return {"service_type": service_type, "region": settings.KEYSTONE_REGION, "url": url}


def _failure_response(request: Request, outcome: Fail) -> JSONResponse:
    """Map a failed login onto an error response and flash its message."""
    message = outcome.message or "Authentication failed"
    flash(request.session, message)

    if outcome.status_code is not None:
        status_code = outcome.status_code
    elif isinstance(outcome.info, IdentityConnectionError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_401_UNAUTHORIZED

    content = {
        "detail": message,
        "type": "authentication_error"
    }
    if isinstance(outcome.info, AuthenticationError):
        content["error_code"] = outcome.info.error_code

    logger.warning(
        "Login rejected",
        extra={
            "status_code": status_code,
            "error_code": content.get("error_code"),
            "path": request.url.path
        }
    )

    return JSONResponse(content=content, status_code=status_code)
