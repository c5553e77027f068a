"""
Signed token issuance and verification.

Tokens are compact JWTs signed with a shared HMAC key. The claim set is
deliberately small: the user id as ``sub``, the username and the issue time.
An ``exp`` claim is only added when a lifetime is configured.
"""

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Dict

import jwt
from jwt.utils import base64url_decode, base64url_encode
from jwt.exceptions import InvalidSubjectError

from ...config.provider import TokenConfig
from ..users import UserIdentity
from .errors import (
    TokenClaimsMissing,
    TokenExpired,
    TokenMalformed,
    TokenSignatureInvalid,
)

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "username"]


def strip_bearer(token: str) -> str:
    """Remove an optional ``Bearer`` prefix."""
    token = token.strip()
    if token.startswith("Bearer "):
        token = token[7:].strip()
    return token


class TokenIssuer:
    """Signs identity claims with the shared secret key."""

    def __init__(self, config: TokenConfig):
        """
        Initialize token issuer with injected config.

        Args:
            config: Token configuration holding the secret key and algorithm
        """
        self._secret_key = config.secret_key
        self.algorithm = config.algorithm
        self.expires_in = config.expires_in

    def build_claims(self, identity: UserIdentity) -> Dict[str, Any]:
        now = datetime.now(UTC)
        claims: Dict[str, Any] = {
            # JWT requires sub to be a string
            "sub": str(identity.id),
            "username": identity.username,
            "iat": now,
        }
        if self.expires_in:
            claims["exp"] = now + timedelta(seconds=self.expires_in)
        return claims

    def issue(self, identity: UserIdentity) -> str:
        """
        Issue a signed token for an authenticated identity.

        Args:
            identity: Identity returned by a successful credential check

        Returns:
            Encoded JWT string
        """
        return jwt.encode(self.build_claims(identity), self._secret_key, algorithm=self.algorithm)


class TokenVerifier:
    """
    Verifies tokens produced by TokenIssuer.

    The identity is rebuilt from the claims alone; the user directory is not
    consulted again.
    """

    def __init__(self, config: TokenConfig):
        """
        Initialize token verifier with injected config.

        Args:
            config: Token configuration; must match the issuer's key and algorithm
        """
        self._secret_key = config.secret_key
        self.algorithm = config.algorithm

    @staticmethod
    def _envelope_parses(token: str) -> bool:
        """Check that the header and payload segments decode to JSON objects."""
        segments = token.split(".")
        if len(segments) != 3:
            return False
        try:
            header = json.loads(base64url_decode(segments[0]))
            payload = json.loads(base64url_decode(segments[1]))
        except ValueError:
            return False
        return isinstance(header, dict) and isinstance(payload, dict)

    @staticmethod
    def _signature_canonical(token: str) -> bool:
        """Check that the signature segment is the unpadded base64url form of its bytes."""
        signature = token.rsplit(".", 1)[-1]
        try:
            return base64url_encode(base64url_decode(signature)).decode("ascii") == signature
        except ValueError:
            return False

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Validate the signature and return the raw claims.

        Raises:
            TokenMalformed: Envelope cannot be parsed or uses another algorithm
            TokenSignatureInvalid: Signature segment does not match
            TokenClaimsMissing: A required claim is absent
            TokenExpired: An exp claim is present and has passed
        """
        if not token:
            raise TokenMalformed("Token is empty")

        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.InvalidSignatureError as e:
            raise TokenSignatureInvalid("Token signature does not match") from e
        except jwt.MissingRequiredClaimError as e:
            raise TokenClaimsMissing(f"Token is missing claim: {e.claim}") from e
        except InvalidSubjectError as e:
            raise TokenClaimsMissing("Token subject is not a user id") from e
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("Token has expired") from e
        except jwt.DecodeError as e:
            # A readable header and payload means only the signature segment is damaged
            if self._envelope_parses(token):
                raise TokenSignatureInvalid("Token signature cannot be decoded") from e
            raise TokenMalformed(f"Token cannot be parsed: {e}") from e
        except jwt.InvalidTokenError as e:
            raise TokenMalformed(f"Invalid token: {e}") from e

        # The decoder re-pads and ignores trailing bits, so several encodings map to one signature
        if not self._signature_canonical(token):
            raise TokenSignatureInvalid("Token signature is not canonically encoded")

        return claims

    def verify(self, token: str) -> UserIdentity:
        """
        Verify a token and recover the identity it asserts.

        Args:
            token: Encoded token, with or without a Bearer prefix

        Returns:
            UserIdentity built from the token's claims
        """
        claims = self.decode(strip_bearer(token or ""))

        username = claims.get("username")
        if not isinstance(username, str) or not username:
            raise TokenClaimsMissing("Token username claim is empty")

        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError) as e:
            raise TokenClaimsMissing("Token subject is not a user id") from e

        return UserIdentity(id=user_id, username=username)
