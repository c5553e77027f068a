"""
Strategy router with dependency injection.

This module follows Black Box Design principles:
- Accepts its strategies via constructor injection
- Dispatches on the strategy tag a request declares
- Collapses every failure of a strategy into one public rejection
"""

import hashlib
import json
import logging
from datetime import UTC, datetime
from typing import Dict, Iterable, Optional

from redis.exceptions import RedisError

from .errors import AuthError, StrategyNotApplicable
from .interfaces import AuthRequest, AuthResult, Strategy, StrategyKind

logger = logging.getLogger(__name__)

INVALID_LOGIN_MESSAGE = "incorrect username or password"
UNAUTHORIZED_MESSAGE = "unauthorized"

REJECTION_MESSAGES = {
    StrategyKind.PASSWORD: INVALID_LOGIN_MESSAGE,
    StrategyKind.TOKEN: UNAUTHORIZED_MESSAGE,
}

AUDIT_KEY = "auth:audit"
AUDIT_MAX_EVENTS = 10000


def username_digest(username: Optional[str]) -> Optional[str]:
    """Short SHA-256 digest so failed attempts can be correlated without storing the name."""
    if not username:
        return None
    return hashlib.sha256(username.encode("utf-8")).hexdigest()[:16]


class StrategyRouter:
    """
    Runs exactly one authentication strategy per request.

    This is a black box that:
    - Accepts any Strategy implementations
    - Never chains or retries strategies
    - Never reveals why a strategy rejected a request
    """

    def __init__(self, strategies: Iterable[Strategy], redis_client=None):
        """
        Initialize with injected strategies.

        Args:
            strategies: Strategy instances, at most one per StrategyKind
            redis_client: Optional async Redis client for the audit trail
        """
        self.strategies: Dict[StrategyKind, Strategy] = {}
        for strategy in strategies:
            if strategy.kind in self.strategies:
                raise ValueError(f"Strategy already registered for {strategy.kind.value}")
            self.strategies[strategy.kind] = strategy

        self.redis = redis_client

        # Track authentication outcomes for metrics
        self.auth_stats = {kind.value: 0 for kind in StrategyKind}
        self.auth_stats["failed"] = 0

    def select(self, request: AuthRequest) -> Strategy:
        """
        Pick the strategy a request declares.

        Raises:
            StrategyNotApplicable: If no strategy is configured for the tag
        """
        try:
            return self.strategies[StrategyKind(request.strategy)]
        except (KeyError, ValueError) as e:
            raise StrategyNotApplicable(f"No strategy configured for {request.strategy!r}") from e

    async def authenticate(self, request: AuthRequest) -> AuthResult:
        """
        Authenticate a request with the strategy it declares.

        Args:
            request: Tagged credentials

        Returns:
            AuthResult with the identity on success, or the collapsed rejection
        """
        try:
            strategy = self.select(request)
            identity = await strategy.authenticate(request)
        except AuthError as e:
            return await self._reject(request, e)

        self.auth_stats[strategy.kind.value] += 1
        logger.info(f"Request authenticated via {strategy.kind.value} for user: {identity.username}")
        await self._log_auth_event(
            "authenticated",
            {"method": strategy.kind.value, "user_id": identity.id, "username": identity.username},
        )

        return AuthResult(ok=True, identity=identity, method=strategy.kind)

    async def _reject(self, request: AuthRequest, error: AuthError) -> AuthResult:
        try:
            kind: Optional[StrategyKind] = StrategyKind(request.strategy)
        except ValueError:
            kind = None
        method = kind.value if kind else str(request.strategy)

        self.auth_stats["failed"] += 1
        logger.warning(f"Authentication via {method} rejected: {error.reason}")
        await self._log_auth_event(
            "authentication_failed",
            {"method": method, "reason": error.reason, "username_digest": username_digest(request.username)},
        )

        return AuthResult(
            ok=False,
            identity=None,
            method=kind,
            error=REJECTION_MESSAGES.get(kind, UNAUTHORIZED_MESSAGE),
            reason=error.reason,
        )

    async def _log_auth_event(self, event_type: str, data: dict):
        """Log authentication event for audit."""
        event = {
            "type": event_type,
            "data": data,
            "timestamp": datetime.now(UTC).isoformat()
        }

        # Store in Redis for audit trail
        if self.redis:
            try:
                await self.redis.lpush(AUDIT_KEY, json.dumps(event))
                await self.redis.ltrim(AUDIT_KEY, 0, AUDIT_MAX_EVENTS - 1)
            except RedisError as e:
                logger.warning(f"Failed to write audit event {event_type}: {e}")

    async def get_auth_stats(self) -> dict:
        """Get authentication statistics."""
        return {
            "stats": dict(self.auth_stats),
            "timestamp": datetime.now(UTC).isoformat()
        }
