"""
Signed, expiring session tokens.

A token has the form ``<payload>.<expiry>.<signature>``:

- ``payload`` is the session data serialized to compact JSON and
  base64url-encoded without padding
- ``expiry`` is an integer epoch-seconds timestamp
- ``signature`` is the unpadded base64url HMAC-SHA256 of ``payload.expiry``

Decoding never raises. Every failure (bad format, bad signature, expired,
malformed payload) collapses to ``None`` so callers can treat it as
"no session".
"""

import base64
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

SecretType = Union[str, bytes]

TOKEN_SEPARATOR = "."


class SessionEncodeError(ValueError):
    """Raised when session data cannot be serialized into a token"""
    pass


def _b64encode(value: bytes) -> str:
    return base64.urlsafe_b64encode(value).decode("ascii").rstrip("=")


def _b64decode(value: str) -> bytes:
    missing_padding = (-len(value)) % 4
    return base64.urlsafe_b64decode(value + ("=" * missing_padding))


def _secret_bytes(secret: SecretType) -> bytes:
    if isinstance(secret, bytes):
        return secret
    return secret.encode("utf-8")


def serialize(data: Mapping[str, Any]) -> str:
    """
    Serialize session data to its canonical JSON form.

    Keys keep their insertion order so the same session content always
    produces the same string.

    Raises:
        SessionEncodeError: If the data is cyclic or not JSON-representable
    """
    try:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SessionEncodeError(f"Session data is not serializable: {e}") from e


def sign(body: str, secret: SecretType) -> str:
    """Return the unpadded base64url HMAC-SHA256 of ``body``"""
    digest = hmac.new(_secret_bytes(secret), body.encode("utf-8"), hashlib.sha256).digest()
    return _b64encode(digest)


def encode(data: Mapping[str, Any], max_age: int, secret: SecretType) -> str:
    """
    Serialize session data into a signed token.

    Args:
        data: JSON-representable session data
        max_age: Lifetime of the token in milliseconds
        secret: HMAC key

    Returns:
        The token string

    Raises:
        ValueError: If ``max_age`` is not positive or ``secret`` is empty
        SessionEncodeError: If the data cannot be serialized
    """
    if not secret:
        raise ValueError("secret must not be empty")
    if max_age <= 0:
        raise ValueError("max_age must be positive")

    try:
        raw = serialize(data).encode("utf-8")
    except UnicodeEncodeError as e:
        raise SessionEncodeError(f"Session data is not valid UTF-8 text: {e}") from e

    payload = _b64encode(raw)
    expiry = int(time.time() + max_age / 1000)
    body = f"{payload}{TOKEN_SEPARATOR}{expiry}"
    return f"{body}{TOKEN_SEPARATOR}{sign(body, secret)}"


def decode(token: str, secret: SecretType) -> Optional[Dict[str, Any]]:
    """
    Verify a token and return the session data it carries.

    The signature is checked before the payload is touched, so nothing
    unauthenticated ever reaches the JSON parser.

    Returns:
        The session data, or None if the token is malformed, tampered,
        signed with another key or expired
    """
    if not token or not secret:
        return None

    body, sep, signature = token.rpartition(TOKEN_SEPARATOR)
    if not sep:
        logger.debug("Invalid session token format: no signature")
        return None

    try:
        expected = sign(body, secret).encode("ascii")
        provided = signature.encode("utf-8")
    except UnicodeError:
        logger.debug("Invalid session token encoding")
        return None

    if not hmac.compare_digest(expected, provided):
        logger.debug("Invalid session token signature")
        return None

    payload, sep, expiry_raw = body.rpartition(TOKEN_SEPARATOR)
    if not sep:
        logger.debug("Invalid session token format: no expiry")
        return None

    try:
        expiry = int(expiry_raw)
    except ValueError:
        logger.debug("Invalid session token expiry: %r", expiry_raw)
        return None

    if expiry <= time.time():
        logger.debug("Expired session token")
        return None

    try:
        data = json.loads(_b64decode(payload).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as e:
        # Signed but unparseable; should not happen with a private secret
        logger.debug(f"Invalid session token payload: {e}")
        return None

    if not isinstance(data, dict):
        logger.debug("Session token payload is not an object")
        return None

    return data
