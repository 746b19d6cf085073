"""
ASGI integration for cookie sessions.

``SessionCookieMiddleware`` creates one ``SessionHandle`` per connection,
exposes it under ``scope["session_handle"]`` and calls ``write_back()``
exactly once, when the ``http.response.start`` message passes through
``send``. That message carries the response headers, so every change the
handler made to the session is visible at that point.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from session_cookie.core.config import SessionConfigError, SessionCookieConfig, build_session_config
from session_cookie.core.cookies import strip_cookie_headers
from session_cookie.core.lifecycle import SessionHandle
from session_cookie.core.session import Session

logger = logging.getLogger(__name__)

SESSION_SCOPE_KEY = "session_handle"


class SessionCookieMiddleware:
    """
    Stateless signed-cookie session middleware.

    Either pass a ready ``SessionCookieConfig`` or the individual options;
    a missing secret fails here, at application startup.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: Optional[SessionCookieConfig] = None,
        *,
        name: Optional[str] = None,
        secret: Optional[str] = None,
        max_age: Optional[int] = None,
        cookie: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.app = app
        if config is not None:
            if any(option is not None for option in (name, secret, max_age, cookie)):
                raise SessionConfigError("pass either a config or individual options, not both")
            self.config = config
        else:
            self.config = build_session_config(
                name=name, secret=secret, max_age=max_age, cookie=cookie
            )
        logger.info(
            "Session cookie middleware configured: name=%s, max_age_ms=%d",
            self.config.name,
            self.config.max_age,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        handle = SessionHandle(
            self.config,
            inbound_token=connection.cookies.get(self.config.name),
            client_host=connection.client.host if connection.client else None,
        )
        scope[SESSION_SCOPE_KEY] = handle

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                header_value = handle.write_back()
                if header_value is not None:
                    if self.config.cookie.overwrite:
                        message["headers"] = strip_cookie_headers(
                            list(message.get("headers", [])), self.config.name
                        )
                    headers = MutableHeaders(scope=message)
                    headers.append("set-cookie", header_value)
            await send(message)

        await self.app(scope, receive, send_wrapper)


def get_session_handle(request: Request) -> SessionHandle:
    """FastAPI dependency returning the session handle of the current request"""
    handle = request.scope.get(SESSION_SCOPE_KEY)
    if handle is None:
        raise RuntimeError("SessionCookieMiddleware must be installed to access the session")
    return handle


def get_session(request: Request) -> Optional[Session]:
    """FastAPI dependency returning the current session (None once cleared)"""
    return get_session_handle(request).get()
