"""
Module 02 - Merkle Proofs Convenience Wrappers
Thin class-based wrappers around the tree functions.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- MerkleProver: Generate proofs for leaves or entitlement records
- MerkleVerifier: Verify proofs (the runtime proof gate uses this)
"""
from __future__ import annotations

from typing import Sequence

from core.merkle.entitlement import EntitlementRecord
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_root,
    leaf_hash,
    verify_merkle_proof,
    verify_record,
)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove_record(records, index=1)
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def prove(leaves: Sequence[bytes], index: int) -> MerkleProof:
        """
        Generate a Merkle proof for the leaf at the given index.

        Raises:
            IndexError: If index is out of range
            ValueError: If leaves is empty
        """
        return build_merkle_proof(leaves, index)

    @staticmethod
    def prove_record(records: Sequence[EntitlementRecord], index: int) -> MerkleProof:
        """Generate a proof for records[index]; records are hashed as leaves first."""
        leaves = [leaf_hash(r.recipient, r.amount) for r in records]
        return build_merkle_proof(leaves, index)

    @staticmethod
    def compute_root(leaves: Sequence[bytes]) -> bytes:
        return build_merkle_root(leaves)

    @staticmethod
    def compute_root_from_records(records: Sequence[EntitlementRecord]) -> bytes:
        leaves = [leaf_hash(r.recipient, r.amount) for r in records]
        return build_merkle_root(leaves)


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    All methods are pure and return False for malformed input.
    """

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """Verify a pre-hashed leaf is included in root."""
        proof = MerkleProof(leaf=leaf, index=0, siblings=list(siblings), root=root)
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_record_in_root(
        recipient: str,
        amount: int,
        siblings: Sequence[bytes],
        root: bytes,
        depth: int | None = None,
    ) -> bool:
        """
        Verify (recipient, amount) is included in root.

        Args:
            recipient: Recipient address
            amount: Entitlement in base units
            siblings: Proof siblings, bottom-up
            root: Published root
            depth: Expected proof length, if the tree depth is known

        Returns:
            True if the proof is valid, False otherwise
        """
        return verify_record(recipient, amount, siblings, root, depth=depth)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
