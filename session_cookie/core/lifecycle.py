"""
Per-request session binding.

A ``SessionHandle`` is created once per request from the shared
configuration and the inbound cookie value. Handler code reads and
replaces the session through it; the integrating framework must call
``write_back()`` exactly once, after the handler has run and before the
response headers are sent.
"""

import logging
from enum import Enum
from typing import Any, Mapping, Optional

from session_cookie.core import codec
from session_cookie.core.config import SessionCookieConfig
from session_cookie.core.cookies import render_removal, render_set_cookie
from session_cookie.core.session import Session
from session_cookie.core.utils.logging_config import log_security_event

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNACCESSED = "unaccessed"
    ACTIVE = "active"
    CLEARED = "cleared"


class SessionHandle:
    """Lazy, write-once binding between one request and its session cookie."""

    def __init__(
        self,
        config: SessionCookieConfig,
        inbound_token: Optional[str] = None,
        client_host: Optional[str] = None,
    ):
        self.config = config
        self._inbound_token = inbound_token
        self._client_host = client_host
        self._session: Optional[Session] = None
        self._state = SessionState.UNACCESSED
        self._written = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def accessed(self) -> bool:
        return self._state is not SessionState.UNACCESSED

    @property
    def cleared(self) -> bool:
        return self._state is SessionState.CLEARED

    def get(self) -> Optional[Session]:
        """
        Return the session for this request, decoding the inbound cookie on
        first access.

        Returns:
            The session, or None if it was cleared during this request
        """
        if self._state is SessionState.CLEARED:
            return None
        if self._session is not None:
            return self._session

        self._session = self._load()
        self._state = SessionState.ACTIVE
        return self._session

    def set(self, data: Optional[Mapping[str, Any]]) -> Optional[Session]:
        """
        Replace the session wholesale.

        Args:
            data: New session data, or None to clear the session

        Returns:
            The new session, or None when cleared

        Raises:
            SessionAssignmentError: If data is neither a mapping nor None
        """
        if data is None:
            self.clear()
            return None

        self._session = Session.create(data)
        self._state = SessionState.ACTIVE
        return self._session

    def clear(self) -> None:
        """Drop the session; write-back will remove the cookie"""
        self._session = None
        self._state = SessionState.CLEARED

    @property
    def is_new(self) -> bool:
        session = self.get()
        return session is None or session.is_new

    @property
    def is_changed(self) -> bool:
        session = self.get()
        return session is None or session.is_changed

    @property
    def is_populated(self) -> bool:
        session = self.get()
        return session is not None and session.is_populated

    def _load(self) -> Session:
        if self._inbound_token:
            data = codec.decode(self._inbound_token, self.config.secret)
            if data is not None:
                return Session.restore(data)
            log_security_event(
                "session_rejected",
                "Rejected invalid or expired session token",
                level=logging.DEBUG,
                ip_address=self._client_host,
            )
        return Session.create()

    def write_back(self) -> Optional[str]:
        """
        Produce the outbound Set-Cookie header for this request.

        Must be called exactly once, right before the response headers
        are sent. Encoding failures are logged and yield no cookie so the
        response still goes out.

        Returns:
            The Set-Cookie header value, or None if the cookie is untouched

        Raises:
            RuntimeError: If called more than once for the same request
        """
        if self._written:
            raise RuntimeError("session already written back for this request")
        self._written = True

        if self._state is SessionState.UNACCESSED:
            return None

        name = self.config.name
        options = self.config.cookie

        try:
            if self._state is SessionState.CLEARED:
                return render_removal(name, options)

            if self._session is not None and self._session.is_populated:
                token = codec.encode(self._session.data, self.config.max_age, self.config.secret)
                return render_set_cookie(name, token, options, max_age=self.config.cookie_max_age)
        except Exception as e:
            logger.warning("Error saving session: %s", e)

        return None
