"""
Module 02 - Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- keccak256 known values (EVM Keccak, not NIST SHA3)
- double_hash / hash_concat composition
- to_hex/from_hex round trip and digest validation
"""
import hashlib

import pytest

from core.crypto.hashing import (
    DIGEST_SIZE,
    ZERO_HASH,
    digest_from_hex,
    double_hash,
    from_hex,
    hash_bytes,
    hash_concat,
    is_digest,
    keccak256,
    to_hex,
)


class TestKeccak256:
    """Tests for keccak256() function."""

    def test_keccak_empty_known_value(self):
        """Keccak-256 of empty input matches the EVM constant."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_keccak_is_not_sha3_256(self):
        """Pre-standard Keccak padding differs from NIST SHA3-256."""
        assert keccak256(b"abc") != hashlib.sha3_256(b"abc").digest()

    def test_keccak_accepts_bytearray(self):
        assert keccak256(bytearray(b"hello")) == keccak256(b"hello")

    def test_digest_size(self):
        assert len(keccak256(b"anything")) == DIGEST_SIZE == 32

    def test_hash_bytes_is_keccak(self):
        assert hash_bytes(b"data") == keccak256(b"data")


class TestComposition:
    """double_hash and hash_concat."""

    def test_double_hash(self):
        data = b"\x01" * 64
        assert double_hash(data) == keccak256(keccak256(data))

    def test_hash_concat_is_order_sensitive(self):
        a, b = keccak256(b"a"), keccak256(b"b")
        assert hash_concat(a, b) == keccak256(a + b)
        assert hash_concat(a, b) != hash_concat(b, a)


class TestHex:
    """Hex helpers."""

    def test_to_hex_prefix(self):
        assert to_hex(b"\xde\xad\xbe\xef") == "0xdeadbeef"

    def test_round_trip(self):
        data = keccak256(b"round trip")
        assert from_hex(to_hex(data)) == data

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError):
            from_hex("deadbeef")

    def test_from_hex_rejects_odd_length(self):
        with pytest.raises(ValueError):
            from_hex("0xabc")

    def test_digest_from_hex_requires_32_bytes(self):
        assert digest_from_hex(to_hex(ZERO_HASH)) == ZERO_HASH
        with pytest.raises(ValueError):
            digest_from_hex("0x" + "00" * 31)


class TestIsDigest:

    def test_zero_hash_is_digest(self):
        assert is_digest(ZERO_HASH)

    @pytest.mark.parametrize("value", [b"", b"\x00" * 31, b"\x00" * 33, "0x" + "00" * 32, None])
    def test_non_digests(self, value):
        assert not is_digest(value)
