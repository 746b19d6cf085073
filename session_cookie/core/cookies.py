"""Set-Cookie header rendering for the session cookie."""

import http.cookies
from email.utils import format_datetime
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from session_cookie.core.config import CookieOptions

EXPIRED = format_datetime(datetime(1970, 1, 1, tzinfo=timezone.utc), usegmt=True)


def render_set_cookie(
    name: str,
    value: str,
    options: CookieOptions,
    max_age: Optional[int] = None,
    expires: Optional[str] = None,
) -> str:
    """
    Render a single Set-Cookie header value.

    Args:
        name: Cookie name
        value: Cookie value
        options: Cookie attributes
        max_age: Max-Age attribute in seconds
        expires: Expires attribute, already formatted as an HTTP date

    Returns:
        The header value, without the "Set-Cookie:" prefix
    """
    cookie: http.cookies.BaseCookie = http.cookies.SimpleCookie()
    cookie[name] = value
    morsel = cookie[name]
    if max_age is not None:
        morsel["max-age"] = max_age
    if expires is not None:
        morsel["expires"] = expires
    if options.path:
        morsel["path"] = options.path
    if options.domain:
        morsel["domain"] = options.domain
    if options.secure:
        morsel["secure"] = True
    if options.httponly:
        morsel["httponly"] = True
    if options.samesite:
        morsel["samesite"] = options.samesite
    return cookie.output(header="").strip()


def render_removal(name: str, options: CookieOptions) -> str:
    """Render a Set-Cookie header value that removes the cookie"""
    return render_set_cookie(name, "", options, max_age=0, expires=EXPIRED)


def strip_cookie_headers(raw_headers: List[Tuple[bytes, bytes]], name: str) -> List[Tuple[bytes, bytes]]:
    """Drop any Set-Cookie headers already targeting ``name``"""
    prefix = f"{name}=".encode("latin-1")
    return [
        (key, value)
        for key, value in raw_headers
        if not (key.lower() == b"set-cookie" and value.startswith(prefix))
    ]
