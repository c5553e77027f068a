"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")

DEFAULT_USERS = "admin:admin,tester:tester"


@dataclass(frozen=True)
class TokenConfig:
    """Token signing configuration shared by issuer and verifier."""
    secret_key: str
    algorithm: str = "HS256"
    expires_in: Optional[int] = None


@dataclass
class DirectoryConfig:
    """Seed users for the in-memory directory as (username, password) pairs."""
    users: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str
    redis_url: Optional[str]
    token_header: str = "token"


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_token_config(self) -> TokenConfig:
        """Get token configuration."""
        ...

    def get_directory_config(self) -> DirectoryConfig:
        """Get user directory configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


def parse_users(users_env: str) -> List[Tuple[str, str]]:
    """
    Parse a ``name:password,name:password`` list.

    Raises:
        ValueError: If an entry has no password or a username repeats
    """
    users: List[Tuple[str, str]] = []
    seen = set()

    for entry in users_env.split(","):
        entry = entry.strip()
        if not entry:
            continue

        if ":" not in entry:
            raise ValueError(f"USERS entry '{entry}' must use the username:password format")

        username, password = entry.split(":", 1)
        username = username.strip()
        if not username or not password:
            raise ValueError(f"USERS entry '{entry}' needs both a username and a password")
        if username in seen:
            raise ValueError(f"Duplicate username in USERS: {username}")

        seen.add(username)
        users.append((username, password))

    return users


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_token_config(self) -> TokenConfig:
        """Get token configuration from environment variables."""
        # The signing key is required - no default for security
        secret_key = os.getenv("SECRET_KEY")
        if not secret_key:
            raise ValueError(
                "SECRET_KEY environment variable is required. "
                "It must be identical on every instance that issues or verifies tokens."
            )

        algorithm = os.getenv("JWT_ALGORITHM", "HS256").upper()
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported JWT_ALGORITHM '{algorithm}'. "
                f"Expected one of: {', '.join(SUPPORTED_ALGORITHMS)}"
            )

        expires_in_env = os.getenv("TOKEN_EXPIRES_IN")
        expires_in = int(expires_in_env) if expires_in_env else None
        if expires_in is not None and expires_in <= 0:
            raise ValueError("TOKEN_EXPIRES_IN must be a positive number of seconds")

        return TokenConfig(
            secret_key=secret_key,
            algorithm=algorithm,
            expires_in=expires_in,
        )

    def get_directory_config(self) -> DirectoryConfig:
        """Get seed users from environment variables."""
        return DirectoryConfig(users=parse_users(os.getenv("USERS", DEFAULT_USERS)))

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("API_DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            redis_url=os.getenv("REDIS_URL") or None,
            token_header=os.getenv("TOKEN_HEADER", "token"),
        )
