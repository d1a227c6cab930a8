"""
Module 02 - Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Double-hashed entitlement leaves
- Sorted-pair parent hashing (proofs carry no left/right bits)
- Layer-by-layer tree construction with per-leaf proofs
- Pure proof verification

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = keccak256(keccak256(abi.encode(address, uint256)))
2. Parent hashing: parent = keccak256(min(a, b) || max(a, b))
3. Odd layers: the lone last node is paired with the zero digest
   (parent = keccak256(sort(node, 0x00..00))); the zero digest is that
   node's proof sibling at that level
4. Single leaf: root = leaf, proof is empty
5. Empty leaves: rejected

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf order is the input order; this module never sorts leaves
- The same multiset of records in another order yields another root
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from core.crypto.codec import encode_pair, encode_record
from core.crypto.hashing import ZERO_HASH, double_hash, is_digest, keccak256
from core.schemas.errors import InputException


# Upper bound on accepted proof length; a uint256-indexed tree is never deeper
MAX_PROOF_LENGTH: int = 256


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    The proof allows verification that a leaf is included in a tree
    with a known root, without revealing the entire tree.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = b""

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(a: bytes, b: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    The pair is sorted before hashing, so merkle_parent(a, b) ==
    merkle_parent(b, a).

    Args:
        a: One child hash
        b: The other child hash

    Returns:
        Parent hash (32 bytes)
    """
    return keccak256(encode_pair(a, b))


def leaf_hash(recipient: str, amount: int) -> bytes:
    """
    Compute the leaf digest for one entitlement record.

    Raises:
        InputException: If the record cannot be encoded
    """
    return double_hash(encode_record(recipient, amount))


def _next_layer(layer: Sequence[bytes]) -> list[bytes]:
    parents: list[bytes] = []
    for i in range(0, len(layer), 2):
        right = layer[i + 1] if i + 1 < len(layer) else ZERO_HASH
        parents.append(merkle_parent(layer[i], right))
    return parents


def build_merkle_layers(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every layer of the tree, leaves first, root layer last.

    Layers are stored unpadded; the zero digest only appears as an
    implicit right-hand partner while hashing.

    Example: [a, b, c] -> [[a, b, c], [ab, c0], [root]]

    Raises:
        ValueError: If leaves is empty or holds a non-digest
    """
    if len(leaves) == 0:
        raise ValueError("Cannot build tree from empty leaf list")
    for i, leaf in enumerate(leaves):
        if not is_digest(leaf):
            raise ValueError(f"Leaf {i} is not a 32-byte digest")

    layers: list[list[bytes]] = [[bytes(leaf) for leaf in leaves]]
    while len(layers[-1]) > 1:
        layers.append(_next_layer(layers[-1]))
    return layers


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Args:
        leaves: Sequence of 32-byte leaf hashes. Order matters and is preserved.

    Returns:
        32-byte Merkle root
    """
    return build_merkle_layers(leaves)[-1][0]


def proof_from_layers(layers: Sequence[Sequence[bytes]], index: int) -> list[bytes]:
    """
    Collect the sibling path of leaf `index` from prebuilt layers.

    At each level the sibling is the node at index XOR 1, or the zero
    digest when that position is past the end of an odd layer.
    """
    if index < 0 or index >= len(layers[0]):
        raise IndexError(
            f"Leaf index {index} out of range for {len(layers[0])} leaves"
        )

    siblings: list[bytes] = []
    position = index
    for layer in layers[:-1]:
        sibling_index = position ^ 1
        siblings.append(layer[sibling_index] if sibling_index < len(layer) else ZERO_HASH)
        position //= 2
    return siblings


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Args:
        leaves: Sequence of leaf hashes
        index: 0-based index of the leaf to prove

    Returns:
        MerkleProof with leaf, index, siblings (bottom-up), and root

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    layers = build_merkle_layers(leaves)
    return MerkleProof(
        leaf=layers[0][index] if 0 <= index < len(layers[0]) else b"",
        index=index,
        siblings=proof_from_layers(layers, index),
        root=layers[-1][0],
    )


def process_proof(leaf: bytes, siblings: Sequence[bytes]) -> Optional[bytes]:
    """
    Fold a leaf with its siblings and return the implied root.

    Returns None if the proof is malformed (non-digest member or longer
    than MAX_PROOF_LENGTH) rather than raising.
    """
    if not is_digest(leaf) or len(siblings) > MAX_PROOF_LENGTH:
        return None

    current = bytes(leaf)
    for sibling in siblings:
        if not is_digest(sibling):
            return None
        current = merkle_parent(current, sibling)
    return current


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof.

    Recomputes the root from the leaf and siblings and compares it with
    the claimed root. The index is informational: sorted-pair hashing
    does not need it.

    Returns:
        True if proof is valid, False otherwise
    """
    computed = process_proof(proof.leaf, proof.siblings)
    return computed is not None and computed == proof.root


def verify_record(
    recipient: str,
    amount: int,
    siblings: Sequence[bytes],
    root: bytes,
    *,
    depth: int | None = None,
) -> bool:
    """
    Verify that (recipient, amount) is committed under root.

    Args:
        recipient: Recipient address
        amount: Entitlement in base units
        siblings: Proof siblings, bottom-up
        root: Published Merkle root
        depth: Expected proof length; a proof of any other length fails

    Returns:
        True only if the recomputed root equals root. Never raises for
        malformed records or proofs.
    """
    if depth is not None and len(siblings) != depth:
        return False
    try:
        leaf = leaf_hash(recipient, amount)
    except InputException:
        return False
    computed = process_proof(leaf, siblings)
    return computed is not None and computed == root


def compute_proof_length(num_leaves: int) -> int:
    """
    Number of siblings in every proof of a tree with num_leaves leaves.

    Equals ceil(log2(num_leaves)); 0 for a single leaf.

    Raises:
        ValueError: If num_leaves is less than 1
    """
    if num_leaves < 1:
        raise ValueError(f"Tree must have at least one leaf, got {num_leaves}")
    return (num_leaves - 1).bit_length()


__all__ = [
    "MAX_PROOF_LENGTH",
    "MerkleProof",
    "merkle_parent",
    "leaf_hash",
    "build_merkle_layers",
    "build_merkle_root",
    "proof_from_layers",
    "build_merkle_proof",
    "process_proof",
    "verify_merkle_proof",
    "verify_record",
    "compute_proof_length",
]
