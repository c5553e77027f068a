"""
Authentication Service Facade following Black Box Design principles.

This module provides:
- A clean interface for login and token checks that hides the strategies
- Standardized authentication results
- Protocol definitions for swappable implementations
"""

from typing import Optional, Protocol

from .interfaces import AuthRequest, AuthResult, StrategyKind, TokenSigner
from .router import StrategyRouter


class AuthenticationService(Protocol):
    """Protocol for authentication services."""

    async def login(self, username: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Check a username and password and issue a token.

        Returns:
            AuthResult carrying the token on success
        """
        ...

    async def verify(self, token: Optional[str]) -> AuthResult:
        """
        Check a token presented on a protected request.

        Returns:
            AuthResult carrying the identity on success
        """
        ...


class DefaultAuthenticationService:
    """
    Default implementation of AuthenticationService.

    This facade hides the router and the token issuer and provides a
    stable interface for the API layer.
    """

    def __init__(self, router: StrategyRouter, issuer: TokenSigner):
        """
        Initialize with a strategy router and a token issuer.

        Args:
            router: Router holding the password and token strategies
            issuer: Issuer used after a successful password login
        """
        self.router = router
        self._issuer = issuer

    async def authenticate(self, request: AuthRequest) -> AuthResult:
        return await self.router.authenticate(request)

    async def login(self, username: Optional[str], password: Optional[str]) -> AuthResult:
        result = await self.router.authenticate(
            AuthRequest(strategy=StrategyKind.PASSWORD, username=username, password=password)
        )
        if result.ok:
            result.token = self._issuer.issue(result.identity)
        return result

    async def verify(self, token: Optional[str]) -> AuthResult:
        return await self.router.authenticate(
            AuthRequest(strategy=StrategyKind.TOKEN, token=token)
        )
