#!/usr/bin/env python3
"""
authgate - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the API server

All authentication logic is in the modules, following black box principles.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import redis.asyncio as redis
import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from authgate import __version__
from authgate.config.provider import ConfigProvider, EnvConfigProvider
from authgate.logging_config import configure_logging, get_logging_config
from authgate.modules.api import (
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    TokenResponse,
    UserResponse,
)
from authgate.modules.auth import AuthFactory, DefaultAuthenticationService
from authgate.modules.middleware import create_token_middleware
from authgate.modules.users import UserDirectory, UserIdentity

# Configuration provider (centralized config access)
config_provider: ConfigProvider = EnvConfigProvider()
api_config = config_provider.get_api_config()

configure_logging(api_config.log_level)
logger = logging.getLogger(__name__)

# Module instances (initialized at startup)
auth_service: Optional[DefaultAuthenticationService] = None
user_directory: Optional[UserDirectory] = None
redis_client: Optional[redis.Redis] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    global auth_service, user_directory, redis_client

    logger.info("Starting authgate API...")

    # Audit trail is optional
    if api_config.redis_url:
        redis_client = redis.from_url(api_config.redis_url, encoding="utf-8", decode_responses=True)
        logger.info("Audit trail enabled")
    else:
        logger.info("REDIS_URL not set - audit trail disabled")

    user_directory = AuthFactory.build_directory(config_provider)
    auth_service = AuthFactory.build(config_provider, user_directory, redis_client)
    logger.info("Authentication service initialized via factory")

    logger.info("authgate API started successfully")

    yield

    logger.info("Shutting down authgate API...")
    if redis_client:
        await redis_client.aclose()
    auth_service = None
    user_directory = None
    redis_client = None
    logger.info("authgate API shutdown complete")


app = FastAPI(
    title="authgate API",
    description="Username/password login with signed tokens",
    version=__version__,
    lifespan=lifespan,
)

token_middleware = create_token_middleware(
    lambda: auth_service,
    header_name=api_config.token_header,
)


@app.middleware("http")
async def require_token(request: Request, call_next):
    return await token_middleware(request, call_next)


# Dependency injection helpers
async def current_identity(request: Request) -> UserIdentity:
    """Identity attached to the request by the token middleware."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise HTTPException(401, "unauthorized")
    return identity


def get_user_directory() -> UserDirectory:
    if not user_directory:
        raise HTTPException(503, "Service not initialized")
    return user_directory


# Auth Endpoints


@app.post(
    "/auth/login",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(payload: LoginRequest):
    """
    Exchange a username and password for a signed token.

    Unknown users and wrong passwords get the same response.
    """
    if not auth_service:
        raise HTTPException(503, "Service not initialized")

    result = await auth_service.login(payload.username, payload.password)
    if not result.ok:
        return JSONResponse(
            status_code=401,
            content=ErrorResponse(error=result.error, status=401).model_dump(),
        )

    return TokenResponse(token=result.token)


# User Endpoints


@app.get("/user", response_model=List[UserResponse])
async def list_users(
    identity: UserIdentity = Depends(current_identity),
    directory: UserDirectory = Depends(get_user_directory),
):
    """List all users. Passwords are never included."""
    users = await directory.list_all()
    return [UserResponse.from_identity(user) for user in users]


@app.get("/user/me", response_model=UserResponse)
async def read_current_user(identity: UserIdentity = Depends(current_identity)):
    """Return the identity asserted by the presented token."""
    return UserResponse.from_identity(identity)


# Health Check


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for Kubernetes probes.

    Returns:
        200: Service healthy
        503: Service unhealthy
    """
    modules_ready = auth_service is not None and user_directory is not None

    audit_status = "disabled"
    if redis_client:
        try:
            await redis_client.ping()
            audit_status = "connected"
        except redis.RedisError as e:
            logger.error(f"Audit store unreachable: {e}")
            audit_status = "disconnected"

    if modules_ready and audit_status != "disconnected":
        return HealthResponse(
            status="healthy",
            modules="initialized",
            audit=audit_status,
            version=__version__,
        )

    return JSONResponse(
        status_code=503,
        content=HealthResponse(
            status="unhealthy",
            modules="initialized" if modules_ready else "not initialized",
            audit=audit_status,
        ).model_dump(exclude_none=True),
    )


@app.get("/metrics")
async def metrics():
    """
    Prometheus-compatible metrics endpoint (optional).

    Returns authentication counters per strategy.
    """
    if not auth_service:
        return Response(content="", status_code=503)

    stats = (await auth_service.router.get_auth_stats())["stats"]

    lines = [
        "# HELP authgate_authentications_total Authentication outcomes by method",
        "# TYPE authgate_authentications_total counter",
    ]
    for outcome, count in stats.items():
        lines.append(f'authgate_authentications_total{{outcome="{outcome}"}} {count}')

    return Response(content="\n".join(lines) + "\n", media_type="text/plain")


# Error handlers


@app.exception_handler(redis.ConnectionError)
async def redis_error_handler(request, exc):
    """Handle Redis connection errors."""
    logger.error(f"Redis connection error: {exc}")
    return JSONResponse(status_code=503, content={"error": "Audit store connection failed", "status": 503})


if __name__ == "__main__":
    uvicorn.run(
        "authgate.main:app",
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )
