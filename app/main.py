from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logger import setup_logging
from app.middleware.cors import configure_cors
from app.middleware.logging import RequestLoggerMiddleware
from app.middleware import error_handler

# Routers
from app.routers import auth as auth_router
from app.routers import users as users_router
from app.routers import health as health_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    setup_logging()
    description = (
        "Snappie Backend API.\n\n"
        "This service provides registration, login and session-token endpoints "
        "for the Snappie place discovery app."
    )

    openapi_tags = [
        {"name": "authentication", "description": "Register, login, logout and profile of the current user."},
        {"name": "users", "description": "Public user profiles."},
        {"name": "health", "description": "Health checks and service status endpoints."},
    ]

    app = FastAPI(
        title="Snappie Backend API",
        version="1.0.0",
        description=description,
        openapi_tags=openapi_tags,
    )

    # Middleware
    configure_cors(app)
    app.add_middleware(RequestLoggerMiddleware)

    # Exception handlers
    app.add_exception_handler(StarletteHTTPException, error_handler.http_exception_handler)
    app.add_exception_handler(RequestValidationError, error_handler.validation_exception_handler)
    app.add_exception_handler(Exception, error_handler.unhandled_exception_handler)

    # Include routers
    app.include_router(health_router.router, prefix=settings.API_PREFIX)
    app.include_router(auth_router.router, prefix=settings.API_PREFIX)
    app.include_router(users_router.router, prefix=settings.API_PREFIX)

    return app


app = create_app()
