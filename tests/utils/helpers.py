"""
Test helper functions for session cookie tests

These helpers parse Set-Cookie headers and build tampered tokens.
"""

import http.cookies
from typing import Dict, List, Tuple


def parse_set_cookie(header_value: str) -> Tuple[str, str, Dict[str, str]]:
    """Split a Set-Cookie header value into name, value and attributes"""
    cookie = http.cookies.SimpleCookie()
    cookie.load(header_value)
    assert len(cookie) == 1, f"Expected exactly one cookie in {header_value!r}"
    name, morsel = next(iter(cookie.items()))
    attributes = {key: value for key, value in morsel.items() if value}
    return name, morsel.value, attributes


def set_cookie_headers(response) -> List[str]:
    """Return every Set-Cookie header of an httpx response"""
    return response.headers.get_list("set-cookie")


def flip_char(token: str, index: int) -> str:
    """Replace the character at ``index`` with a different token-safe character"""
    original = token[index]
    if original.isdigit():
        replacement = "1" if original != "1" else "2"
    else:
        replacement = "A" if original != "A" else "B"
    return token[:index] + replacement + token[index + 1:]


def token_segments(token: str) -> Tuple[str, str, str]:
    """Return (payload, expiry, signature) of a token"""
    payload, expiry, signature = token.split(".")
    return payload, expiry, signature
