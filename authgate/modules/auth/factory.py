"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the authentication stack based on configuration
- Wires dependencies together
- Returns only the service facade (hiding implementation)
"""

import logging
from typing import Any, Optional

from ...config.provider import ConfigProvider, TokenConfig
from ..users import InMemoryUserDirectory, UserDirectory
from .credentials import CredentialValidator
from .router import StrategyRouter
from .service import DefaultAuthenticationService
from .strategies import PasswordStrategy, TokenStrategy
from .tokens import TokenIssuer, TokenVerifier

logger = logging.getLogger(__name__)


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Creates all auth components
    - Wires them together via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build_directory(config_provider: ConfigProvider) -> InMemoryUserDirectory:
        """Build the in-memory user directory from configuration."""
        return InMemoryUserDirectory.from_credentials(config_provider.get_directory_config().users)

    @staticmethod
    def build_service(
        token_config: TokenConfig,
        user_directory: UserDirectory,
        redis_client: Optional[Any] = None
    ) -> DefaultAuthenticationService:
        """
        Wire the password and token strategies around one shared key.

        Args:
            token_config: Key and algorithm shared by issuer and verifier
            user_directory: Store consulted by the password strategy
            redis_client: Optional Redis client for audit logging

        Returns:
            DefaultAuthenticationService facade
        """
        issuer = TokenIssuer(token_config)
        verifier = TokenVerifier(token_config)

        router = StrategyRouter(
            strategies=[
                PasswordStrategy(CredentialValidator(user_directory)),
                TokenStrategy(verifier),
            ],
            redis_client=redis_client,
        )
        return DefaultAuthenticationService(router, issuer)

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        user_directory: Optional[UserDirectory] = None,
        redis_client: Optional[Any] = None
    ) -> DefaultAuthenticationService:
        """
        Build the complete authentication stack.

        Args:
            config_provider: Configuration provider
            user_directory: Optional user store; defaults to the configured in-memory users
            redis_client: Optional Redis client for audit logging

        Returns:
            DefaultAuthenticationService facade (hides all implementation details)
        """
        token_config = config_provider.get_token_config()

        if user_directory is None:
            user_directory = AuthFactory.build_directory(config_provider)

        logger.info(
            f"Building authentication stack with password and token strategies "
            f"({token_config.algorithm})"
        )
        if token_config.expires_in is None:
            logger.info("Tokens are issued without expiry")

        return AuthFactory.build_service(token_config, user_directory, redis_client)
