"""
Authentication Middleware Module - Black Box Interface

Purpose: Gate protected routes of a FastAPI application behind a signed token
Interface: Middleware factory functions that return configured middleware
Hidden: Header extraction, error formatting

Can be used by any FastAPI app or sub-app that needs token authentication.
Completely independent and replaceable.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from ..auth.interfaces import AuthResult

logger = logging.getLogger(__name__)

DEFAULT_SKIP_PATHS = {
    "/health": ["GET"],
    "/metrics": ["GET"],
    "/auth/login": ["POST"],
    "/docs": ["GET"],
    "/docs/oauth2-redirect": ["GET"],
    "/redoc": ["GET"],
    "/openapi.json": ["GET"],
}


class TokenAuthMiddleware:
    """
    Token authentication middleware for FastAPI applications.

    Every request that is not on a skip path must carry a token that the
    validator accepts; otherwise it is rejected before reaching a route.
    """

    def __init__(
        self,
        token_validator: Callable[[str], Awaitable[AuthResult]],
        header_names: Optional[List[str]] = None,
        skip_paths: Optional[Dict[str, list]] = None,
        error_format: str = "json",
        log_attempts: bool = True
    ):
        """
        Initialize token authentication middleware.

        Args:
            token_validator: Async function that checks a token and returns an AuthResult
            header_names: Headers checked in order for the token (default: token, Authorization)
            skip_paths: Dict of {path: [methods]} to skip authentication
            error_format: Error response format ("json" or "jsonrpc")
            log_attempts: Whether to log authentication attempts
        """
        self.token_validator = token_validator
        self.header_names = header_names or ["token", "authorization"]
        self.skip_paths = skip_paths or {}
        self.error_format = error_format
        self.log_attempts = log_attempts

    def should_skip_auth(self, request: Request) -> bool:
        """Check if authentication should be skipped for this request."""
        path = str(request.url.path)
        method = request.method.upper()

        if path in self.skip_paths:
            allowed_methods = self.skip_paths[path]
            if "*" in allowed_methods or method in allowed_methods:
                return True

        return False

    def extract_token(self, request: Request) -> Optional[str]:
        """Extract the token from the first configured header that is set."""
        for header_name in self.header_names:
            token = request.headers.get(header_name)
            if token:
                return token
        return None

    def format_error(self, status_code: int, message: str, request_id: Optional[str] = None) -> Dict[str, Any]:
        """Format error response based on configured format."""
        if self.error_format == "jsonrpc":
            return {
                "jsonrpc": "2.0",
                "error": {
                    "code": -32700 if status_code == 401 else -32603,
                    "message": message
                },
                "id": request_id
            }
        else:
            return {
                "error": message,
                "status": status_code
            }

    async def __call__(self, request: Request, call_next):
        """Process the request through token authentication middleware."""
        if self.should_skip_auth(request):
            if self.log_attempts:
                logger.debug(f"Skipping auth for {request.method} {request.url.path}")
            return await call_next(request)

        token = self.extract_token(request)

        if not token:
            if self.log_attempts:
                logger.warning(f"Request to {request.url.path} without token")

            return JSONResponse(
                status_code=401,
                content=self.format_error(401, "unauthorized")
            )

        try:
            result = await self.token_validator(token)
        except Exception as e:
            logger.error(f"Error during authentication: {e}")
            return JSONResponse(
                status_code=500,
                content=self.format_error(500, "Internal error during authentication")
            )

        if not result.ok:
            if self.log_attempts:
                logger.warning(f"Invalid token presented for {request.url.path}")

            return JSONResponse(
                status_code=401,
                content=self.format_error(401, result.error or "unauthorized")
            )

        # Store authentication info for downstream use
        request.state.identity = result.identity
        request.state.auth_method = result.method

        return await call_next(request)


def create_token_middleware(
    get_auth_service: Callable[[], Any],
    header_name: str = "token",
    skip_paths: Optional[Dict[str, list]] = None,
    error_format: str = "json"
) -> TokenAuthMiddleware:
    """
    Factory function to create token authentication middleware.

    Args:
        get_auth_service: Zero-argument callable returning a service with an
            async verify(token) method, or None before startup has finished
        header_name: Header carrying the token; Authorization is also accepted
        skip_paths: Paths to skip authentication {"/path": ["GET", "POST"]}
        error_format: "json" or "jsonrpc" error format

    Returns:
        Configured TokenAuthMiddleware instance
    """
    async def validator(token: str) -> AuthResult:
        """Validate token using the auth service."""
        service = get_auth_service()
        if service is None:
            raise RuntimeError("Authentication service not initialized")
        return await service.verify(token)

    paths = dict(DEFAULT_SKIP_PATHS)
    if skip_paths:
        paths.update(skip_paths)

    header_names = [header_name]
    if header_name.lower() != "authorization":
        header_names.append("authorization")

    return TokenAuthMiddleware(
        token_validator=validator,
        header_names=header_names,
        skip_paths=paths,
        error_format=error_format
    )


# Module interface - what this module provides
__all__ = [
    "DEFAULT_SKIP_PATHS",
    "TokenAuthMiddleware",
    "create_token_middleware"
]
