"""
Authentication Module - Black Box Interface

Purpose: Validate passwords, issue tokens and verify them per request
Interface: AuthFactory.build(), login(), verify(), authenticate()
Hidden: Token format, signing key, strategy wiring, comparison logic

This module can be replaced with any other auth implementation
(OAuth, external service) without affecting other modules.
"""

from .errors import (
    AuthError,
    CredentialInvalid,
    StrategyNotApplicable,
    TokenClaimsMissing,
    TokenError,
    TokenExpired,
    TokenMalformed,
    TokenSignatureInvalid,
)
from .factory import AuthFactory
from .interfaces import AuthRequest, AuthResult, StrategyKind
from .service import AuthenticationService, DefaultAuthenticationService

__all__ = [
    "AuthError",
    "AuthFactory",
    "AuthRequest",
    "AuthResult",
    "AuthenticationService",
    "CredentialInvalid",
    "DefaultAuthenticationService",
    "StrategyKind",
    "StrategyNotApplicable",
    "TokenClaimsMissing",
    "TokenError",
    "TokenExpired",
    "TokenMalformed",
    "TokenSignatureInvalid",
]
