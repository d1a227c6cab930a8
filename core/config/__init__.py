"""
Runtime Configuration Module

Provides configuration loading and management for the airdrop tooling.
"""

from .runtime import (
    RuntimeConfig,
    DomainConfig,
    TokenConfig,
    BuildConfig,
    ApiConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "DomainConfig",
    "TokenConfig",
    "BuildConfig",
    "ApiConfig",
    "get_default_config",
    "set_default_config",
]
