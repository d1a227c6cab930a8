"""
Module 09C - CLI Configuration

Configuration management for the airdrop CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from core.config.runtime import RuntimeConfig


# Environment variable prefix
ENV_PREFIX = "AIRDROP_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Domain, token and builder settings shared with the library
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()
    config.runtime = RuntimeConfig.from_dict(data)

    # Logging
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    # Output
    config.default_output_format = data.get(
        "default_output_format", config.default_output_format
    )

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path and config_path.exists():
        config = load_config_from_file(config_path)

    default_paths = [
        Path.cwd() / "airdrop.json",
        Path.cwd() / ".airdrop.json",
        Path.home() / ".config" / "airdrop" / "config.json",
    ]

    if config_path is None:
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Override with environment variables
    config.runtime = config.runtime.with_env_overrides()
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human",
  "domain": {
    "name": "MerkleAirdrop",
    "version": "1",
    "chain_id": 31337,
    "verifying_contract": "0x5FbDB2315678afecb367f032d93F642f64180aa3"
  },
  "token": {
    "address": "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512",
    "name": "Airdrop Token",
    "symbol": "AIR"
  },
  "build": {
    "input_path": "target/input.json",
    "output_path": "target/output.json",
    "allow_duplicates": false,
    "default_amount": 25000000000000000000
  }
}
"""
