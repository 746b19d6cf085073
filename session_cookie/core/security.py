"""
Security utilities for session secrets

This module provides helpers to generate strong session secrets and to
flag weak ones. Weak secrets are reported, not rejected: the only hard
requirement on a secret is that it is not empty.
"""

import logging
import secrets
import string
from typing import List

logger = logging.getLogger(__name__)

MIN_SECRET_LENGTH = 32
MIN_UNIQUE_CHARS = 8

INSECURE_DEFAULTS = {
    "your-secret-key-here-change-in-production",
    "change-me",
    "changeme",
    "secret",
    "password",
    "123456",
    "admin",
    "mysecretkey",
}


def generate_secure_secret(length: int = 64) -> str:
    """
    Generate a cryptographically secure session secret.

    Args:
        length: Length of the secret (default: 64 characters)

    Returns:
        A random string suitable for use as SESSION_SECRET
    """
    alphabet = string.ascii_letters + string.digits + "-_"
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def check_secret_strength(secret: str) -> List[str]:
    """
    Check a session secret against basic strength requirements.

    Args:
        secret: The secret to check

    Returns:
        A list of human-readable problems, empty if the secret looks strong
    """
    problems = []

    if len(secret) < MIN_SECRET_LENGTH:
        problems.append(f"secret is shorter than {MIN_SECRET_LENGTH} characters")

    if secret.lower() in INSECURE_DEFAULTS:
        problems.append("secret appears to be an insecure default value")

    if len(set(secret.lower())) < MIN_UNIQUE_CHARS:
        problems.append("secret has insufficient entropy (too repetitive)")

    if not problems:
        logger.debug("Session secret strength check passed")

    return problems
