"""
Module 02 - Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Keccak-256 hashing for raw bytes (the EVM hash, not NIST SHA3-256)
- Hex encoding/decoding with 0x prefix
- Digest validation

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- All operations are deterministic
"""
from __future__ import annotations

from eth_utils import keccak

# Width of every digest handled by the tree and the signature scheme
DIGEST_SIZE: int = 32

# All-zero digest used to pair a lone node on an odd layer
ZERO_HASH: bytes = b"\x00" * DIGEST_SIZE


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(bytes(data))


def hash_bytes(data: bytes) -> bytes:
    """Alias for keccak256()."""
    return keccak256(data)


def double_hash(data: bytes) -> bytes:
    """
    Hash twice: keccak256(keccak256(data)).

    Leaves are double hashed so that no 64-byte internal node preimage
    can be replayed as a leaf.
    """
    return keccak256(keccak256(data))


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences, in the given order.

    Args:
        left: First digest
        right: Second digest

    Returns:
        32-byte Keccak-256 digest of left || right
    """
    return keccak256(left + right)


def is_digest(value: object) -> bool:
    """True if value is a bytes object of exactly DIGEST_SIZE bytes."""
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_SIZE


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + bytes(data).hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not isinstance(hex_string, str) or not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {str(hex_string)[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def digest_from_hex(hex_string: str) -> bytes:
    """Decode a 0x-prefixed hex string that must hold exactly one digest."""
    data = from_hex(hex_string)
    if len(data) != DIGEST_SIZE:
        raise ValueError(
            f"Digest must be {DIGEST_SIZE} bytes, got {len(data)}"
        )
    return data


__all__ = [
    "DIGEST_SIZE",
    "ZERO_HASH",
    "keccak256",
    "hash_bytes",
    "double_hash",
    "hash_concat",
    "is_digest",
    "to_hex",
    "from_hex",
    "digest_from_hex",
]
