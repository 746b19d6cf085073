import logging
from typing import Optional

from fastapi import FastAPI

from session_cookie.api import session as session_api
from session_cookie.core.config import Settings, settings as default_settings
from session_cookie.core.middleware import SessionCookieMiddleware
from session_cookie.core.utils.logging_config import init_application_logging

logger = logging.getLogger("session_cookie.main")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the FastAPI application with cookie sessions enabled.

    The session configuration is validated here, so a missing
    SESSION_SECRET stops the application from starting.
    """
    app_settings = app_settings or default_settings
    session_config = app_settings.session_config()

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Stateless signed cookie sessions",
        version=app_settings.VERSION,
    )

    app.add_middleware(SessionCookieMiddleware, config=session_config)

    app.include_router(session_api.router, prefix="/session", tags=["Session"])

    @app.get("/health")
    def health_check():
        """Basic health check endpoint."""
        return {"status": "healthy", "version": app_settings.VERSION}

    logger.info("Application created: %s", app_settings.APP_NAME)
    return app


def get_application() -> FastAPI:
    """Application factory used by the ASGI server"""
    init_application_logging(dev_mode=default_settings.DEV_MODE)
    return create_app(default_settings)
