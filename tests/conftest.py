"""
Global test configuration and fixtures for session-cookie

This module provides shared fixtures that can be used across all test
modules: secrets, validated session configuration, application settings
and a test client with the session middleware installed.
"""

import pytest
from fastapi.testclient import TestClient

from session_cookie.core.config import Settings, build_session_config
from session_cookie.main import create_app

TEST_SECRET = "test-secret-key-for-testing-only-9f8e7d6c"
TEST_MAX_AGE_MS = 60 * 60 * 1000


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def secret():
    """HMAC secret used across tests"""
    return TEST_SECRET


@pytest.fixture(scope="function")
def session_config(secret):
    """Validated session cookie configuration"""
    return build_session_config(secret=secret, max_age=TEST_MAX_AGE_MS)


@pytest.fixture(scope="function")
def test_settings(secret):
    """Application settings isolated from the environment and .env files"""
    return Settings(
        _env_file=None,
        SESSION_SECRET=secret,
        SESSION_MAX_AGE_MS=TEST_MAX_AGE_MS,
        DEV_MODE=True,
    )


# ============================================================================
# Application Client Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def app(test_settings):
    """Demo FastAPI application with cookie sessions"""
    return create_app(test_settings)


@pytest.fixture(scope="function")
def client(app):
    """Create FastAPI test client"""
    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def sample_session_data():
    """Nested session data as a login flow would store it"""
    return {
        "id": 7,
        "role": "admin",
        "profile": {"userName": "Ada", "email": "ada@example.com"},
        "scopes": ["read", "write"],
        "verified": True,
        "last_seen": None,
    }


# ============================================================================
# Test Markers and Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as a fast isolated unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as exercising the ASGI stack"
    )
    config.addinivalue_line(
        "markers", "security: mark test as security-related"
    )
