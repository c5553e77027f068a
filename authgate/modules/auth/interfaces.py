"""Authentication interfaces following Black Box Design principles."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from ..users import UserIdentity


class StrategyKind(str, Enum):
    """Tag naming the authentication strategy a request declares."""

    PASSWORD = "password"
    TOKEN = "token"


@dataclass(frozen=True)
class AuthRequest:
    """Credentials presented by one request, tagged with the strategy to run."""
    strategy: StrategyKind
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    token: Optional[str] = field(default=None, repr=False)


@dataclass
class AuthResult:
    """Standardized authentication result."""
    ok: bool
    identity: Optional[UserIdentity]
    method: Optional[StrategyKind]
    error: Optional[str] = None
    reason: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)


class Strategy(Protocol):
    """Protocol for pluggable authentication strategies."""

    kind: StrategyKind

    async def authenticate(self, request: AuthRequest) -> UserIdentity:
        """
        Authenticate a request.

        Returns:
            The authenticated identity

        Raises:
            AuthError: If the presented credentials are rejected
        """
        ...


class TokenSigner(Protocol):
    """Protocol for token issuers."""

    def issue(self, identity: UserIdentity) -> str:
        ...


class TokenValidator(Protocol):
    """Protocol for token verifiers - allows swappable implementations."""

    def verify(self, token: str) -> UserIdentity:
        """
        Verify a token and recover the identity it asserts.

        Raises:
            TokenError: If the token is malformed, tampered with or incomplete
        """
        ...
