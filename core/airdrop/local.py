"""
Module 04 - Local Authority Factory
Stand up a claim authority for a published proof bundle, backed by an
in-memory token. Used by the CLI claim simulation and the HTTP API.

Owner: Protocol Engineer
Module ID: M04
"""
from __future__ import annotations

import logging
from pathlib import Path

from core.airdrop.authority import ClaimAuthority
from core.airdrop.models import AirdropConfig
from core.airdrop.token import InMemoryToken
from core.config.runtime import RuntimeConfig
from core.merkle.builder import load_proof_bundle
from core.merkle.merkle_tree import compute_proof_length
from core.schemas.errors import InputException

logger = logging.getLogger(__name__)


def build_local_authority(
    runtime: RuntimeConfig,
    bundle_path: str | Path,
    *,
    fund: bool = True,
) -> ClaimAuthority:
    """
    Create an authority for a proof bundle using the runtime domain and token.

    The token's holder is the verifying contract. With fund=True it is
    minted the bundle total, enough to pay every entry exactly once.

    Raises:
        FileNotFoundError: If the bundle does not exist
        InputException: If the bundle is malformed, empty or names more than one root
    """
    entries = load_proof_bundle(bundle_path)
    if not entries:
        raise InputException("Proof bundle is empty")
    roots = {entry.root.lower() for entry in entries}
    if len(roots) != 1:
        raise InputException(
            "Proof bundle names more than one root",
            details={"roots": sorted(roots)},
        )

    total = sum(entry.record.amount for entry in entries)
    depth = compute_proof_length(len(entries)) if runtime.api.enforce_proof_depth else None
    config = AirdropConfig.from_runtime(runtime, entries[0].root, proof_depth=depth)

    token = InMemoryToken(
        holder=config.domain.verifying_contract,
        name=runtime.token.name,
        symbol=runtime.token.symbol,
    )
    if fund:
        token.mint(token.holder, total)
    logger.info(
        f"Local authority for root {config.merkle_root} "
        f"({len(entries)} entries, funded with {total if fund else 0})"
    )
    return ClaimAuthority(config, token)


__all__ = ["build_local_authority"]
