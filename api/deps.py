"""
Module 09D - API Dependencies

Dependency injection for the API.
Provides the process-wide claim authority served by the routes.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Optional

from api.errors import NotConfiguredError
from core.airdrop.authority import ClaimAuthority
from core.airdrop.local import build_local_authority
from core.config.runtime import RuntimeConfig
from core.schemas.errors import InputException

logger = logging.getLogger(__name__)


_authority: Optional[ClaimAuthority] = None
_authority_lock = threading.Lock()


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./airdrop.json
      2. ./.airdrop.json
      3. ~/.config/airdrop/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "airdrop.json",
        Path.cwd() / ".airdrop.json",
        Path.home() / ".config" / "airdrop" / "config.json",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                logger.info(f"Loaded config from {path}")
                config = RuntimeConfig.from_dict(data)
                break
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def create_authority(config: RuntimeConfig) -> ClaimAuthority:
    """
    Build the served authority from the configured proof bundle.

    Raises:
        NotConfiguredError: If no bundle path is configured
        FileNotFoundError / InputException: If the bundle cannot be loaded
    """
    if not config.api.bundle_path:
        raise NotConfiguredError()
    return build_local_authority(
        config,
        Path(config.api.bundle_path),
        fund=config.api.fund_token,
    )


def get_authority() -> ClaimAuthority:
    """
    FastAPI dependency returning the process-wide authority, creating it on first use.

    Raises:
        NotConfiguredError: If no bundle path is configured, or the bundle
            is missing or malformed
    """
    global _authority
    with _authority_lock:
        if _authority is None:
            try:
                _authority = create_authority(_load_runtime_config())
            except (FileNotFoundError, InputException) as e:
                logger.error(f"Cannot serve airdrop: {e}")
                raise NotConfiguredError(f"Airdrop bundle unavailable: {e}") from e
            logger.info(f"Serving airdrop with root {_authority.config.merkle_root}")
        return _authority


def set_authority(authority: Optional[ClaimAuthority]) -> None:
    """Install (or with None, clear) the served authority."""
    global _authority
    with _authority_lock:
        _authority = authority


def get_optional_authority() -> Optional[ClaimAuthority]:
    """Like get_authority, but None when no airdrop can be served."""
    try:
        return get_authority()
    except NotConfiguredError:
        return None
