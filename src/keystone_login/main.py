"""Main entry point for the Keystone Login application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from keystone_login.api.routes import build_strategy, router
from keystone_login.auth.authentication_middleware import SessionUserMiddleware
from keystone_login.core.config import Settings, settings as default_settings
from keystone_login.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management
    Logs the effective identity configuration on startup
    """
    settings: Settings = app.state.settings

    logger.info("Starting Keystone Login...")
    logger.info(
        "Keystone configuration",
        extra={
            "host": settings.HOST,
            "port": settings.PORT,
            "debug": settings.DEBUG,
            "log_level": settings.LOG_LEVEL,
            "auth_url": settings.KEYSTONE_AUTH_URL or None,
            "region": settings.KEYSTONE_REGION
        }
    )
    if not settings.KEYSTONE_AUTH_URL:
        logger.warning("KEYSTONE_AUTH_URL is not set - every login will be rejected")

    yield

    logger.info("Shutting down Keystone Login...")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Custom validation error handler"""
    logger.warning(
        "Request validation failed",
        extra={
            "url": str(request.url),
            "method": request.method,
            "errors": exc.errors()
        }
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Request validation failed",
            "errors": exc.errors()
        }
    )


async def general_exception_handler(request: Request, exc: Exception):
    """General exception handler for unhandled errors"""
    logger.error(
        "Unhandled exception",
        extra={
            "url": str(request.url),
            "method": request.method,
            "error": str(exc)
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error occurred"
        }
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings

    app = FastAPI(
        title="Keystone Login",
        description="Username/password login against an OpenStack Keystone identity endpoint",
        version="0.1.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check and system status"
            },
            {
                "name": "auth",
                "description": "Login, logout and the current account"
            }
        ]
    )
    app.state.settings = settings
    app.state.strategy = build_strategy(settings)

    # Session user is restored inside the session cookie middleware
    app.add_middleware(SessionUserMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        session_cookie=settings.SESSION_COOKIE,
        https_only=not settings.DEBUG
    )

    # Add custom exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(router, tags=["auth"])

    # Root endpoint
    @app.get("/", tags=["health"])
    async def root(request: Request):
        """Root endpoint with service information and available endpoints"""
        user = getattr(request.state, "user", None)
        return {
            "service": "Keystone Login",
            "version": "0.1.0",
            "status": "running",
            "user": user.to_dict() if user else None,
            "endpoints": {
                "health": "/health",
                "login": "/login",
                "logout": "/logout",
                "account": "/account",
                "service_endpoint": "/account/endpoints/{service_type}"
            }
        }

    return app


# Create app instance for uvicorn to find
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    settings = default_settings
    setup_logging(settings)

    logger.info("Starting Keystone Login...")

    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
        server_header=False,  # Don't reveal server info
        date_header=True,
    )


if __name__ == "__main__":
    main()
