"""
Module 02 - Entitlement Tree Builder
Offline construction of the airdrop commitment and its proof bundle.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- EntitlementTree: root, leaves, layers and per-index proofs of one build
- build_entitlement_tree: records -> tree, with a full self-check
- verify_proof_bundle: re-check a published bundle entry by entry
- load/save helpers for input documents and proof bundles

A build either returns a complete, self-verified tree or raises
InputException. No partial artifact is ever produced.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from core.crypto.hashing import to_hex
from core.merkle.entitlement import (
    EntitlementRecord,
    ProofBundleEntry,
    load_entitlement_list,
)
from core.merkle.merkle_tree import (
    build_merkle_layers,
    compute_proof_length,
    leaf_hash,
    process_proof,
    proof_from_layers,
    verify_record,
)
from core.schemas.canonical import dumps_canonical
from core.schemas.errors import ErrorCodes, InputException
from core.schemas.verification import CheckResult, VerificationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntitlementTree:
    """
    Result of one build.

    Attributes:
        records: Input records, in leaf order
        leaves: Leaf digests, leaves[i] belongs to records[i]
        layers: All layers, leaves first, root layer last
        root: The commitment
        proofs: Sibling path per leaf index, bottom-up
    """
    records: tuple[EntitlementRecord, ...]
    leaves: tuple[bytes, ...]
    layers: tuple[tuple[bytes, ...], ...]
    root: bytes
    proofs: dict[int, list[bytes]] = field(default_factory=dict)

    @property
    def depth(self) -> int:
        """Length of every proof in this tree."""
        return len(self.layers) - 1

    @property
    def total_amount(self) -> int:
        return sum(record.amount for record in self.records)

    def proof_for(self, index: int) -> list[bytes]:
        if index not in self.proofs:
            raise IndexError(
                f"Leaf index {index} out of range for {len(self.leaves)} leaves"
            )
        return list(self.proofs[index])

    def index_of(self, recipient: str) -> int:
        """First leaf index belonging to recipient."""
        probe = EntitlementRecord(recipient=recipient, amount=0).recipient
        for i, record in enumerate(self.records):
            if record.recipient == probe:
                return i
        raise KeyError(f"{recipient} is not part of this tree")

    def bundle_entry(self, index: int) -> ProofBundleEntry:
        record = self.records[index]
        return ProofBundleEntry(
            inputs=record.as_inputs(),
            proof=[to_hex(sibling) for sibling in self.proof_for(index)],
            root=to_hex(self.root),
            leaf=to_hex(self.leaves[index]),
        )

    def to_bundle(self) -> list[ProofBundleEntry]:
        return [self.bundle_entry(i) for i in range(len(self.records))]


def build_entitlement_tree(
    records: Sequence[EntitlementRecord],
    *,
    self_check: bool = True,
) -> EntitlementTree:
    """
    Build the commitment for an ordered list of entitlement records.

    Args:
        records: At least one record. Leaf index = position in this list.
        self_check: Re-verify every proof against the root before returning

    Returns:
        EntitlementTree with root and one proof per record

    Raises:
        InputException: If records is empty or the self-check fails
    """
    if len(records) == 0:
        raise InputException("Cannot build a commitment from an empty entitlement list")

    seen: set[str] = set()
    for i, record in enumerate(records):
        if record.recipient in seen:
            logger.warning(f"Recipient {record.recipient} repeated at index {i}")
        seen.add(record.recipient)

    leaves = [leaf_hash(record.recipient, record.amount) for record in records]
    layers = build_merkle_layers(leaves)
    root = layers[-1][0]
    proofs = {i: proof_from_layers(layers, i) for i in range(len(leaves))}

    tree = EntitlementTree(
        records=tuple(records),
        leaves=tuple(leaves),
        layers=tuple(tuple(layer) for layer in layers),
        root=root,
        proofs=proofs,
    )

    if self_check:
        expected_depth = compute_proof_length(len(records))
        for i, record in enumerate(records):
            if not verify_record(
                record.recipient, record.amount, proofs[i], root, depth=expected_depth
            ):
                raise InputException(
                    f"Self-check failed: proof for index {i} does not verify",
                    details={"index": i, "recipient": record.recipient},
                )

    logger.info(
        f"Built commitment {to_hex(root)} over {len(records)} records "
        f"(depth={tree.depth})"
    )
    return tree


def build_proof_bundle(records: Sequence[EntitlementRecord]) -> list[ProofBundleEntry]:
    """Build a tree and return its serialisable proof bundle."""
    return build_entitlement_tree(records).to_bundle()


def verify_proof_bundle(
    entries: Sequence[ProofBundleEntry],
    *,
    root: bytes | None = None,
) -> VerificationResult:
    """
    Re-verify every entry of a proof bundle.

    Checks per entry: inputs decode, leaf matches the recomputed leaf,
    root matches the expected root, proof folds to that root. Also checks
    that all entries share one root and one proof length.

    Args:
        entries: Bundle entries, in leaf order
        root: Expected root; defaults to the first entry's root

    Returns:
        VerificationResult; never raises for bad entries
    """
    checks: list[CheckResult] = []
    if not entries:
        checks.append(CheckResult.failed("bundle_nonempty", "Proof bundle is empty"))
        return VerificationResult.from_checks(checks)

    expected_root = root if root is not None else entries[0].root_bytes
    expected_depth = compute_proof_length(len(entries))

    for i, entry in enumerate(entries):
        check_id = f"entry_{i}"
        try:
            record = entry.record
        except InputException as e:
            checks.append(CheckResult.failed(
                check_id,
                f"Entry {i} has malformed inputs: {e.message}",
                index=i,
                code=e.code,
            ))
            continue

        recomputed_leaf = leaf_hash(record.recipient, record.amount)
        if recomputed_leaf != entry.leaf_bytes:
            checks.append(CheckResult.failed(
                check_id,
                f"Entry {i} leaf does not match its inputs",
                index=i,
                code=ErrorCodes.LEAF_HASH_MISMATCH,
            ))
            continue

        if entry.root_bytes != expected_root:
            checks.append(CheckResult.failed(
                check_id,
                f"Entry {i} names a different root",
                index=i,
                code=ErrorCodes.ROOT_MISMATCH,
                details={"root": entry.root},
            ))
            continue

        siblings = entry.proof_bytes
        computed = process_proof(recomputed_leaf, siblings)
        if computed != expected_root:
            checks.append(CheckResult.failed(
                check_id,
                f"Entry {i} proof does not fold to the root",
                index=i,
                code=ErrorCodes.ROOT_MISMATCH,
            ))
            continue

        if len(siblings) != expected_depth:
            checks.append(CheckResult.warning(
                check_id,
                f"Entry {i} proof has {len(siblings)} siblings, expected {expected_depth}",
                index=i,
            ))
            continue

        checks.append(CheckResult.passed(
            check_id,
            f"Entry {i} verifies for {record.recipient}",
            index=i,
        ))

    return VerificationResult.from_checks(checks)


# =============================================================================
# File IO
# =============================================================================

def load_entitlement_file(
    path: str | Path,
    *,
    allow_duplicates: bool = False,
) -> list[EntitlementRecord]:
    """
    Read and validate an entitlement document from disk.

    Raises:
        FileNotFoundError: If path does not exist
        InputException: If the file is not valid JSON or not a valid document
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Entitlement file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputException(f"Entitlement file is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InputException("Entitlement file must contain a JSON object")
    return load_entitlement_list(data, allow_duplicates=allow_duplicates)


def save_json_artifact(obj: Any, path: str | Path, *, indent: int | None = 2) -> Path:
    """Write an artifact as canonical JSON with a trailing newline."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_canonical(obj, indent=indent) + "\n", encoding="utf-8")
    return path


def save_proof_bundle(entries: Sequence[ProofBundleEntry], path: str | Path) -> Path:
    return save_json_artifact(list(entries), path)


def load_proof_bundle(path: str | Path) -> list[ProofBundleEntry]:
    """
    Read a proof bundle from disk.

    Raises:
        FileNotFoundError: If path does not exist
        InputException: If the file is not a JSON array of valid entries
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Proof bundle not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputException(f"Proof bundle is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise InputException("Proof bundle must be a JSON array")
    try:
        return [ProofBundleEntry.model_validate(item) for item in data]
    except (ValidationError, ValueError) as e:
        raise InputException(f"Malformed proof bundle entry: {e}") from e


__all__ = [
    "EntitlementTree",
    "build_entitlement_tree",
    "build_proof_bundle",
    "verify_proof_bundle",
    "load_entitlement_file",
    "save_json_artifact",
    "save_proof_bundle",
    "load_proof_bundle",
]
