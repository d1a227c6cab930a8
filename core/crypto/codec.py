"""
Module 02 - Record Codec
Canonical byte encoding of entitlement records and node pairs.

Owner: Protocol/Crypto Engineer
Module ID: M02

Encoding Rules (Hard Contracts):
1. Address: 20 raw bytes, left-padded with zeros to a 32-byte word
2. Amount: unsigned 256-bit big-endian integer in a 32-byte word
3. Record: address word || amount word (Solidity abi.encode(address, uint256))
4. Node pair: min(a, b) || max(a, b), digests compared as big-endian integers

Nothing here truncates or coerces. Two distinct (recipient, amount) pairs
can never share an encoding because both words are fixed width.
"""
from __future__ import annotations

from eth_utils import is_hex_address, to_canonical_address, to_checksum_address

from core.crypto.hashing import DIGEST_SIZE, is_digest
from core.schemas.errors import InputException

WORD_SIZE: int = 32
ADDRESS_SIZE: int = 20
UINT256_MAX: int = 2**256 - 1


def normalize_address(value: str, field_path: str | None = None) -> str:
    """
    Validate an EVM address string and return its EIP-55 checksum form.

    Any letter case is accepted; the identity of an address is its 20 bytes.

    Raises:
        InputException: If value is not a 0x-prefixed 40-hex-digit string
    """
    if not isinstance(value, str):
        raise InputException(
            f"Address must be a string, got {type(value).__name__}",
            field_path=field_path,
        )
    candidate = value.strip()
    if not candidate.startswith(("0x", "0X")) or not is_hex_address(candidate):
        raise InputException(
            f"Invalid address: {value!r}",
            field_path=field_path,
        )
    return to_checksum_address(candidate)


def validate_amount(value: int, field_path: str | None = None) -> int:
    """
    Check that value is a Python int in the uint256 range.

    Booleans and floats are rejected rather than coerced.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputException(
            f"Amount must be an integer, got {type(value).__name__}",
            field_path=field_path,
        )
    if value < 0 or value > UINT256_MAX:
        raise InputException(
            f"Amount {value} outside uint256 range",
            field_path=field_path,
        )
    return value


def encode_address(address: str) -> bytes:
    """Encode an address as one left-padded 32-byte word."""
    raw = to_canonical_address(normalize_address(address))
    return b"\x00" * (WORD_SIZE - ADDRESS_SIZE) + raw


def encode_uint256(value: int) -> bytes:
    """Encode an unsigned integer as one big-endian 32-byte word."""
    return validate_amount(value).to_bytes(WORD_SIZE, byteorder="big")


def encode_record(recipient: str, amount: int) -> bytes:
    """
    Encode an entitlement record as abi.encode(address, uint256).

    Args:
        recipient: Recipient address (any case, 0x-prefixed)
        amount: Entitlement in base units

    Returns:
        64 bytes: address word followed by amount word

    Raises:
        InputException: If either field is malformed

    Example:
        >>> len(encode_record("0x" + "11" * 20, 25 * 10**18))
        64
    """
    return encode_address(recipient) + encode_uint256(amount)


def encode_pair(a: bytes, b: bytes) -> bytes:
    """
    Concatenate two digests in canonical (ascending) order.

    Sorting makes the combine step independent of which side the
    sibling sat on, so proofs need no direction bits.

    Raises:
        ValueError: If either input is not a 32-byte digest
    """
    if not is_digest(a) or not is_digest(b):
        raise ValueError(f"Node pair members must be {DIGEST_SIZE}-byte digests")
    a, b = bytes(a), bytes(b)
    return a + b if a <= b else b + a


__all__ = [
    "WORD_SIZE",
    "ADDRESS_SIZE",
    "UINT256_MAX",
    "normalize_address",
    "validate_amount",
    "encode_address",
    "encode_uint256",
    "encode_record",
    "encode_pair",
]
