"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from promptpay.api import app
from promptpay.config import settings


@pytest.fixture
def phone_target() -> str:
    """Ten-digit Thai mobile number."""
    return "0812345678"


@pytest.fixture
def citizen_target() -> str:
    """Thirteen-digit citizen ID."""
    return "0000000000000"


@pytest.fixture
def client() -> TestClient:
    """API client without the startup logging hook."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def api_headers() -> dict[str, str]:
    return {"X-API-Key": settings.api_key}
