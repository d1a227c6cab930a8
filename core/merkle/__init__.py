"""
Module 02 - Merkle Tree and Commitments
Deterministic entitlement commitments + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- EntitlementRecord / EntitlementList / ProofBundleEntry schemas
- MerkleProof and the tree functions (build, prove, verify)
- build_entitlement_tree: the offline builder with self-check
- MerkleProver / MerkleVerifier convenience classes

Canonical Commitment Rules:
1. Leaf hashing: keccak256(keccak256(abi.encode(address, uint256)))
2. Parent hashing: keccak256(sorted pair)
3. Odd layers: lone node paired with the zero digest
4. Single leaf: root = leaf

Usage:
    from core.merkle import EntitlementRecord, build_entitlement_tree, verify_record

    tree = build_entitlement_tree(records)
    assert verify_record(r.recipient, r.amount, tree.proofs[0], tree.root)
"""
from .merkle_tree import (
    MAX_PROOF_LENGTH,
    MerkleProof,
    merkle_parent,
    leaf_hash,
    build_merkle_layers,
    build_merkle_root,
    build_merkle_proof,
    proof_from_layers,
    process_proof,
    verify_merkle_proof,
    verify_record,
    compute_proof_length,
)

from .entitlement import (
    ENTITLEMENT_TYPES,
    EntitlementRecord,
    EntitlementList,
    ProofBundleEntry,
    load_entitlement_list,
    make_entitlement_list,
    parse_amount,
)

from .builder import (
    EntitlementTree,
    build_entitlement_tree,
    build_proof_bundle,
    verify_proof_bundle,
    load_entitlement_file,
    load_proof_bundle,
    save_json_artifact,
    save_proof_bundle,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleProof",
    "MAX_PROOF_LENGTH",
    # Core functions
    "merkle_parent",
    "leaf_hash",
    "build_merkle_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "proof_from_layers",
    "process_proof",
    "verify_merkle_proof",
    "verify_record",
    "compute_proof_length",
    # Schemas
    "ENTITLEMENT_TYPES",
    "EntitlementRecord",
    "EntitlementList",
    "ProofBundleEntry",
    "load_entitlement_list",
    "make_entitlement_list",
    "parse_amount",
    # Builder
    "EntitlementTree",
    "build_entitlement_tree",
    "build_proof_bundle",
    "verify_proof_bundle",
    "load_entitlement_file",
    "load_proof_bundle",
    "save_json_artifact",
    "save_proof_bundle",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
