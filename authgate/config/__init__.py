"""
Config Module - Black Box Interface

Purpose: Typed configuration for tokens, users and the API process
Interface: ConfigProvider protocol, EnvConfigProvider
Hidden: Environment parsing and validation
"""

from .provider import (
    APIConfig,
    ConfigProvider,
    DirectoryConfig,
    EnvConfigProvider,
    TokenConfig,
)

__all__ = ["APIConfig", "ConfigProvider", "DirectoryConfig", "EnvConfigProvider", "TokenConfig"]
