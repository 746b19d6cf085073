"""
Application and session cookie configuration using Pydantic.

Application settings can be set via environment variables or .env file.
The session cookie configuration built from them is immutable and shared
read-only by every request.
"""

import logging
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from session_cookie.core.security import check_secret_strength

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "session"
DEFAULT_MAX_AGE_MS = 60 * 60 * 1000  # One hour
MIN_MAX_AGE_MS = 1000  # Cookie Max-Age is expressed in whole seconds
DEFAULT_SAMESITE = "lax"


class SessionConfigError(ValueError):
    """Raised when the session cookie configuration is invalid"""
    pass


class CookieOptions(BaseModel):
    """Transport-level attributes of the session cookie"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = "/"
    httponly: bool = True
    secure: bool = False
    samesite: Optional[Literal["lax", "strict", "none"]] = DEFAULT_SAMESITE
    domain: Optional[str] = None
    # A session cookie is always fully replaced, never appended
    overwrite: Literal[True] = True

    @field_validator("overwrite", mode="before")
    @classmethod
    def force_overwrite(cls, v: Any) -> bool:
        return True

    @field_validator("samesite", mode="before")
    @classmethod
    def normalize_samesite(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower()
        return v


class SessionCookieConfig(BaseModel):
    """Validated session codec configuration"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = DEFAULT_COOKIE_NAME
    secret: str
    max_age: int = Field(description="Token and cookie lifetime in milliseconds")
    cookie: CookieOptions = Field(default_factory=CookieOptions)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("cookie name must not be empty")
        return v

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, v: str) -> str:
        if not v:
            raise ValueError("secret required")
        return v

    @field_validator("max_age")
    @classmethod
    def validate_max_age(cls, v: int) -> int:
        if v < MIN_MAX_AGE_MS:
            raise ValueError(f"max_age must be at least {MIN_MAX_AGE_MS} milliseconds")
        return v

    @property
    def cookie_max_age(self) -> int:
        """Cookie Max-Age attribute in seconds"""
        return self.max_age // 1000


def build_session_config(
    name: Optional[str] = None,
    secret: Optional[str] = None,
    max_age: Optional[int] = None,
    cookie: Optional[Dict[str, Any]] = None,
) -> SessionCookieConfig:
    """
    Build and validate the session cookie configuration.

    Args:
        name: Cookie name (default "session")
        secret: HMAC key, required
        max_age: Token lifetime in milliseconds (default one hour)
        cookie: Overrides for path / httponly / secure / samesite / domain

    Returns:
        Immutable SessionCookieConfig

    Raises:
        SessionConfigError: If the secret is missing or any option is invalid
    """
    if not secret:
        raise SessionConfigError("secret required")

    options: Dict[str, Any] = {
        "name": name or DEFAULT_COOKIE_NAME,
        "secret": secret,
        "max_age": DEFAULT_MAX_AGE_MS if max_age is None else max_age,
        "cookie": dict(cookie or {}),
    }

    try:
        config = SessionCookieConfig(**options)
    except ValidationError as e:
        raise SessionConfigError(f"Invalid session configuration: {e}") from e

    for warning in check_secret_strength(config.secret):
        logger.warning("Weak session secret: %s", warning)

    return config


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    APP_NAME: str = "session-cookie"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    DEV_MODE: bool = False
    HOST: str = "127.0.0.1"
    PORT: int = 1337

    # Session cookie settings
    SESSION_COOKIE_NAME: str = DEFAULT_COOKIE_NAME
    SESSION_SECRET: Optional[str] = None
    SESSION_MAX_AGE_MS: int = DEFAULT_MAX_AGE_MS
    SESSION_COOKIE_PATH: str = "/"
    SESSION_COOKIE_HTTPONLY: bool = True
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: Optional[str] = DEFAULT_SAMESITE
    SESSION_COOKIE_DOMAIN: Optional[str] = None

    def session_config(self) -> SessionCookieConfig:
        """Build the session cookie configuration from these settings"""
        return build_session_config(
            name=self.SESSION_COOKIE_NAME,
            secret=self.SESSION_SECRET,
            max_age=self.SESSION_MAX_AGE_MS,
            cookie={
                "path": self.SESSION_COOKIE_PATH,
                "httponly": self.SESSION_COOKIE_HTTPONLY,
                "secure": self.SESSION_COOKIE_SECURE,
                "samesite": self.SESSION_COOKIE_SAMESITE,
                "domain": self.SESSION_COOKIE_DOMAIN,
            },
        )


# Global settings instance
settings = Settings()
