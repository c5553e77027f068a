"""
Unit tests for the token authentication middleware.

The middleware is exercised on a throwaway FastAPI app, independently of
the rest of the system.
"""

from typing import Optional

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from authgate.modules.auth.interfaces import AuthResult, StrategyKind
from authgate.modules.middleware import TokenAuthMiddleware, create_token_middleware
from authgate.modules.users import UserIdentity

VALID_TOKENS = {
    "good-token": UserIdentity(id=1, username="admin"),
}


async def mock_validator(token: str) -> AuthResult:
    """Mock token validator for testing."""
    if token.startswith("Bearer "):
        token = token[7:]
    identity = VALID_TOKENS.get(token)
    if identity:
        return AuthResult(ok=True, identity=identity, method=StrategyKind.TOKEN)
    return AuthResult(ok=False, identity=None, method=StrategyKind.TOKEN, error="unauthorized")


def build_app(middleware) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def add_auth(request: Request, call_next):
        return await middleware(request, call_next)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/protected")
    def protected(request: Request):
        identity = request.state.identity
        return {"id": identity.id, "username": identity.username, "method": request.state.auth_method}

    return app


@pytest.fixture
def client():
    middleware = TokenAuthMiddleware(
        token_validator=mock_validator,
        skip_paths={"/health": ["GET"]},
        log_attempts=False,
    )
    return TestClient(build_app(middleware))


def test_skip_path_needs_no_token(client):
    response = client.get("/health")

    assert response.status_code == 200


def test_missing_token_rejected(client):
    response = client.get("/protected")

    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized", "status": 401}


def test_invalid_token_rejected(client):
    response = client.get("/protected", headers={"token": "bad-token"})

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_valid_token_attaches_identity(client):
    response = client.get("/protected", headers={"token": "good-token"})

    assert response.status_code == 200
    assert response.json() == {"id": 1, "username": "admin", "method": "token"}


def test_authorization_header_accepted(client):
    response = client.get("/protected", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 200


def test_validator_error_returns_500():
    async def broken_validator(token: str) -> AuthResult:
        raise RuntimeError("boom")

    middleware = TokenAuthMiddleware(token_validator=broken_validator, log_attempts=False)
    client = TestClient(build_app(middleware))

    response = client.get("/protected", headers={"token": "good-token"})

    assert response.status_code == 500
    assert response.json()["error"] == "Internal error during authentication"


def test_jsonrpc_error_format():
    middleware = TokenAuthMiddleware(token_validator=mock_validator, error_format="jsonrpc")

    body = middleware.format_error(401, "unauthorized", request_id="7")

    assert body == {"jsonrpc": "2.0", "error": {"code": -32700, "message": "unauthorized"}, "id": "7"}


def test_factory_uses_service_getter():
    class FakeService:
        async def verify(self, token: Optional[str]) -> AuthResult:
            return await mock_validator(token)

    service: Optional[FakeService] = None
    middleware = create_token_middleware(lambda: service, header_name="x-auth-token")
    client = TestClient(build_app(middleware))

    # Service not built yet
    assert client.get("/protected", headers={"x-auth-token": "good-token"}).status_code == 500

    service = FakeService()
    assert client.get("/protected", headers={"x-auth-token": "good-token"}).status_code == 200
    assert client.get("/health").status_code == 200
    assert middleware.header_names == ["x-auth-token", "authorization"]


@pytest.mark.parametrize("path", ["/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json"])
def test_documentation_paths_skipped_by_default(path):
    middleware = create_token_middleware(lambda: None)

    assert middleware.skip_paths[path] == ["GET"]
