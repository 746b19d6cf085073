"""
Unit tests for configuration module

These tests validate application settings and the session cookie
configuration, which must fail at startup, never at request time.
"""

import logging
import os
from unittest.mock import patch

import pytest

from session_cookie.core.config import (
    DEFAULT_MAX_AGE_MS,
    MIN_MAX_AGE_MS,
    CookieOptions,
    SessionConfigError,
    SessionCookieConfig,
    Settings,
    build_session_config,
)
from session_cookie.core.security import check_secret_strength, generate_secure_secret

# Mark all tests in this module as unit tests
pytestmark = pytest.mark.unit


class TestBuildSessionConfig:
    """Test session configuration validation"""

    def test_defaults(self, secret):
        """Test default name, lifetime and cookie attributes"""
        config = build_session_config(secret=secret)

        assert config.name == "session"
        assert config.max_age == DEFAULT_MAX_AGE_MS == 3600000
        assert config.cookie.path == "/"
        assert config.cookie.httponly is True
        assert config.cookie.secure is False
        assert config.cookie.overwrite is True
        assert config.cookie.samesite == "lax"

    def test_cookie_max_age_in_seconds(self, secret):
        """Test the cookie Max-Age mirrors max_age in seconds"""
        config = build_session_config(secret=secret, max_age=3 * 60 * 60 * 1000)

        assert config.cookie_max_age == 10800

    @pytest.mark.parametrize("missing", [None, ""])
    def test_missing_secret_is_fatal(self, missing):
        """Test a missing or empty secret is a configuration error"""
        with pytest.raises(SessionConfigError, match="secret required"):
            build_session_config(secret=missing)

    @pytest.mark.parametrize("max_age", [0, -1000])
    def test_non_positive_max_age_is_fatal(self, secret, max_age):
        """Test max_age must be positive"""
        with pytest.raises(SessionConfigError):
            build_session_config(secret=secret, max_age=max_age)

    @pytest.mark.parametrize("max_age", [1, 500, 999])
    def test_sub_second_max_age_is_fatal(self, secret, max_age):
        """Test a lifetime shorter than one cookie Max-Age second is rejected"""
        with pytest.raises(SessionConfigError, match="at least 1000 milliseconds"):
            build_session_config(secret=secret, max_age=max_age)

    def test_minimum_max_age_gives_one_second_cookie(self, secret):
        """Test the shortest accepted lifetime never renders Max-Age=0"""
        config = build_session_config(secret=secret, max_age=MIN_MAX_AGE_MS)

        assert config.cookie_max_age == 1

    def test_unknown_cookie_attribute_is_fatal(self, secret):
        """Test typos in cookie overrides are caught at startup"""
        with pytest.raises(SessionConfigError):
            build_session_config(secret=secret, cookie={"htponly": False})

    def test_invalid_samesite_is_fatal(self, secret):
        """Test samesite only accepts lax, strict or none"""
        with pytest.raises(SessionConfigError):
            build_session_config(secret=secret, cookie={"samesite": "sometimes"})

    def test_config_error_is_value_error(self):
        """Test SessionConfigError can be caught as ValueError"""
        with pytest.raises(ValueError):
            build_session_config(secret=None)

    def test_cookie_overrides(self, secret):
        """Test cookie attribute overrides are applied"""
        config = build_session_config(
            secret=secret,
            cookie={"path": "/api", "httponly": False, "secure": True, "samesite": "None"},
        )

        assert config.cookie.path == "/api"
        assert config.cookie.httponly is False
        assert config.cookie.secure is True
        assert config.cookie.samesite == "none"

    def test_overwrite_always_true(self, secret):
        """Test overwrite cannot be disabled"""
        config = build_session_config(secret=secret, cookie={"overwrite": False})

        assert config.cookie.overwrite is True

    def test_config_is_immutable(self, session_config):
        """Test the shared configuration cannot be changed after startup"""
        with pytest.raises(Exception):
            session_config.secret = "changed"
        with pytest.raises(Exception):
            session_config.cookie.path = "/other"

    def test_weak_secret_is_accepted_with_warning(self, caplog):
        """Test short secrets work but are reported"""
        with caplog.at_level(logging.WARNING):
            config = build_session_config(secret="k")

        assert config.secret == "k"
        assert any("Weak session secret" in r.getMessage() for r in caplog.records)

    def test_strong_secret_no_warning(self, caplog):
        """Test a generated secret does not warn"""
        with caplog.at_level(logging.WARNING):
            build_session_config(secret=generate_secure_secret())

        assert not any("Weak session secret" in r.getMessage() for r in caplog.records)

    def test_direct_model_construction(self, secret):
        """Test SessionCookieConfig can be built directly"""
        config = SessionCookieConfig(secret=secret, max_age=1000, cookie=CookieOptions(path="/x"))

        assert config.cookie.path == "/x"
        assert config.cookie_max_age == 1


class TestSettings:
    """Test application settings"""

    def test_default_settings(self):
        """Test default configuration values"""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.APP_NAME == "session-cookie"
        assert settings.SESSION_COOKIE_NAME == "session"
        assert settings.SESSION_SECRET is None
        assert settings.SESSION_MAX_AGE_MS == 3600000
        assert settings.SESSION_COOKIE_PATH == "/"
        assert settings.SESSION_COOKIE_HTTPONLY is True

    def test_samesite_default_matches_cookie_options(self, secret):
        """Test env-driven and direct configuration agree on the SameSite default"""
        with patch.dict(os.environ, {"SESSION_SECRET": secret}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.SESSION_COOKIE_SAMESITE == CookieOptions().samesite == "lax"
        assert settings.session_config().cookie == build_session_config(secret=secret).cookie

    def test_environment_override(self):
        """Test session settings can be overridden by environment variables"""
        env_vars = {
            "SESSION_SECRET": "secret-from-env",
            "SESSION_MAX_AGE_MS": "10800000",
            "SESSION_COOKIE_NAME": "sid",
            "SESSION_COOKIE_SECURE": "true",
        }

        with patch.dict(os.environ, env_vars):
            settings = Settings(_env_file=None)

        assert settings.SESSION_SECRET == "secret-from-env"
        assert settings.SESSION_MAX_AGE_MS == 10800000
        assert settings.SESSION_COOKIE_NAME == "sid"
        assert settings.SESSION_COOKIE_SECURE is True

    def test_lowercase_environment_override(self):
        """Test environment variable names are case-insensitive"""
        with patch.dict(os.environ, {"session_secret": "lower-case-secret"}):
            settings = Settings(_env_file=None)

        assert settings.SESSION_SECRET == "lower-case-secret"

    def test_session_config_from_settings(self, test_settings, secret):
        """Test settings build a matching session configuration"""
        config = test_settings.session_config()

        assert config.secret == secret
        assert config.max_age == test_settings.SESSION_MAX_AGE_MS

    def test_session_config_without_secret_is_fatal(self):
        """Test a missing SESSION_SECRET fails when building the config"""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        with pytest.raises(SessionConfigError):
            settings.session_config()


class TestSecretStrength:
    """Test secret strength checks"""

    def test_generated_secret_is_strong(self):
        """Test generated secrets pass every check"""
        secret = generate_secure_secret()

        assert len(secret) == 64
        assert check_secret_strength(secret) == []

    def test_insecure_default_flagged(self):
        """Test well-known defaults are flagged"""
        problems = check_secret_strength("MySecretKey")

        assert any("insecure default" in p for p in problems)

    def test_repetitive_secret_flagged(self):
        """Test low-entropy secrets are flagged"""
        problems = check_secret_strength("a" * 40)

        assert problems == ["secret has insufficient entropy (too repetitive)"]
