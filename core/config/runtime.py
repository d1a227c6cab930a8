"""
Runtime Configuration

Central configuration for building commitments and running the claim
authority: signing domain, token, builder paths and the local API.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


# First contract address deployed by a fresh local dev chain
_DEFAULT_VERIFYING_CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
_DEFAULT_TOKEN_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"


@dataclass
class DomainConfig:
    """EIP-712 signing domain of the airdrop."""
    name: str = "MerkleAirdrop"
    version: str = "1"
    chain_id: int = 31337
    verifying_contract: str = _DEFAULT_VERIFYING_CONTRACT


@dataclass
class TokenConfig:
    """Token being distributed."""
    address: str = _DEFAULT_TOKEN_ADDRESS
    name: str = "Airdrop Token"
    symbol: str = "AIR"


@dataclass
class BuildConfig:
    """Configuration for the offline builder."""
    input_path: str = "target/input.json"
    output_path: str = "target/output.json"
    allow_duplicates: bool = False
    default_amount: int = 25 * 10**18


@dataclass
class ApiConfig:
    """Configuration for the local claim API."""
    bundle_path: Optional[str] = None
    fund_token: bool = True
    enforce_proof_depth: bool = True


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    domain: DomainConfig = field(default_factory=DomainConfig)
    token: TokenConfig = field(default_factory=TokenConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - AIRDROP_CHAIN_ID: EIP-712 chain id
        - AIRDROP_VERIFYING_CONTRACT: EIP-712 verifying contract address
        - AIRDROP_DOMAIN_NAME / AIRDROP_DOMAIN_VERSION: EIP-712 name/version
        - AIRDROP_TOKEN_ADDRESS: token address
        - AIRDROP_INPUT_PATH / AIRDROP_OUTPUT_PATH: builder paths
        - AIRDROP_ALLOW_DUPLICATES: accept repeated recipients (true/false)
        - AIRDROP_BUNDLE_PATH: proof bundle served by the API
        - AIRDROP_LOG_LEVEL: log level
        """
        overrides: dict[str, Any] = {}

        # Domain settings
        if os.getenv("AIRDROP_CHAIN_ID"):
            overrides.setdefault("domain", {})["chain_id"] = int(os.getenv("AIRDROP_CHAIN_ID", "0"))
        if os.getenv("AIRDROP_VERIFYING_CONTRACT"):
            overrides.setdefault("domain", {})["verifying_contract"] = os.getenv("AIRDROP_VERIFYING_CONTRACT")
        if os.getenv("AIRDROP_DOMAIN_NAME"):
            overrides.setdefault("domain", {})["name"] = os.getenv("AIRDROP_DOMAIN_NAME")
        if os.getenv("AIRDROP_DOMAIN_VERSION"):
            overrides.setdefault("domain", {})["version"] = os.getenv("AIRDROP_DOMAIN_VERSION")

        # Token
        if os.getenv("AIRDROP_TOKEN_ADDRESS"):
            overrides.setdefault("token", {})["address"] = os.getenv("AIRDROP_TOKEN_ADDRESS")

        # Builder
        if os.getenv("AIRDROP_INPUT_PATH"):
            overrides.setdefault("build", {})["input_path"] = os.getenv("AIRDROP_INPUT_PATH")
        if os.getenv("AIRDROP_OUTPUT_PATH"):
            overrides.setdefault("build", {})["output_path"] = os.getenv("AIRDROP_OUTPUT_PATH")
        if os.getenv("AIRDROP_ALLOW_DUPLICATES"):
            overrides.setdefault("build", {})["allow_duplicates"] = (
                os.getenv("AIRDROP_ALLOW_DUPLICATES", "false").lower() == "true"
            )

        # API
        if os.getenv("AIRDROP_BUNDLE_PATH"):
            overrides.setdefault("api", {})["bundle_path"] = os.getenv("AIRDROP_BUNDLE_PATH")

        if os.getenv("AIRDROP_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("AIRDROP_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        domain_data = data.get("domain", {})
        token_data = data.get("token", {})
        build_data = data.get("build", {})
        api_data = data.get("api", {})

        domain = DomainConfig(**domain_data) if domain_data else DomainConfig()
        token = TokenConfig(**token_data) if token_data else TokenConfig()
        build = BuildConfig(**build_data) if build_data else BuildConfig()
        # to_dict writes the amount as a decimal string
        build.default_amount = int(build.default_amount)
        api = ApiConfig(**api_data) if api_data else ApiConfig()

        return cls(
            domain=domain,
            token=token,
            build=build,
            api=api,
            log_level=data.get("log_level", "INFO"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        for section in ("domain", "token", "build", "api"):
            if section in overrides:
                target = getattr(new_config, section)
                for key, value in overrides[section].items():
                    setattr(target, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "domain": {
                "name": self.domain.name,
                "version": self.domain.version,
                "chain_id": self.domain.chain_id,
                "verifying_contract": self.domain.verifying_contract,
            },
            "token": {
                "address": self.token.address,
                "name": self.token.name,
                "symbol": self.token.symbol,
            },
            "build": {
                "input_path": self.build.input_path,
                "output_path": self.build.output_path,
                "allow_duplicates": self.build.allow_duplicates,
                "default_amount": str(self.build.default_amount),
            },
            "api": {
                "bundle_path": self.api.bundle_path,
                "fund_token": self.api.fund_token,
                "enforce_proof_depth": self.api.enforce_proof_depth,
            },
            "log_level": self.log_level,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
