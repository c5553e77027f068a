"""
Shared pytest fixtures for authgate tests.

This module provides common fixtures including:
- Environment configuration for the API process
- A FastAPI test client running the full application lifespan
- Helpers for logging in and building token headers
"""

import os
import sys
from dataclasses import replace
from typing import Dict

import pytest
from fastapi.testclient import TestClient

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

TEST_SECRET_KEY = "integration-test-secret-key-long-enough-for-hs256"


@pytest.fixture
def app_env(monkeypatch):
    """Environment for the API process with the default seed users."""
    monkeypatch.setenv("SECRET_KEY", TEST_SECRET_KEY)
    monkeypatch.setenv("USERS", "admin:admin,tester:tester")
    monkeypatch.delenv("JWT_ALGORITHM", raising=False)
    monkeypatch.delenv("TOKEN_EXPIRES_IN", raising=False)


@pytest.fixture
def client(app_env, monkeypatch):
    """Test client with startup and shutdown run around each test."""
    from authgate import main

    # Audit trail off for HTTP tests
    monkeypatch.setattr(main, "api_config", replace(main.api_config, redis_url=None))

    with TestClient(main.app) as test_client:
        yield test_client


def login(client: TestClient, username: str, password: str) -> str:
    """Log in and return the issued token."""
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def admin_headers(client) -> Dict[str, str]:
    """Token header for the admin user."""
    return {"token": login(client, "admin", "admin")}
