"""Stateless signed cookie sessions for ASGI applications."""

from session_cookie.core.codec import decode, encode
from session_cookie.core.config import SessionConfigError, SessionCookieConfig, build_session_config
from session_cookie.core.lifecycle import SessionHandle
from session_cookie.core.middleware import SessionCookieMiddleware, get_session, get_session_handle
from session_cookie.core.session import Session, SessionAssignmentError, SessionMetadata

__all__ = [
    "Session",
    "SessionAssignmentError",
    "SessionConfigError",
    "SessionCookieConfig",
    "SessionCookieMiddleware",
    "SessionHandle",
    "SessionMetadata",
    "build_session_config",
    "decode",
    "encode",
    "get_session",
    "get_session_handle",
]
