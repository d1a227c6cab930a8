"""
Module 03 - Claim Signatures
EIP-712 typed-data digests and secp256k1 signer recovery for claims.

Owner: Protocol/Crypto Engineer
Module ID: M03

Digest construction (Hard Contracts):
1. Domain separator:
   keccak256(abi.encode(DOMAIN_TYPEHASH, keccak256(name), keccak256(version),
                        chainId, verifyingContract))
2. Struct hash:
   keccak256(abi.encode(MESSAGE_TYPEHASH, account, amount))
3. Digest:
   keccak256(0x19 0x01 || domainSeparator || structHash)

Recovery never raises on malformed input. Out-of-range components,
malleable high-s values and unknown recovery ids all yield None.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import keccak

from core.crypto.codec import encode_address, encode_uint256, normalize_address
from core.crypto.hashing import DIGEST_SIZE, keccak256
from core.schemas.errors import InputException

logger = logging.getLogger(__name__)


# secp256k1 group order
SECP256K1_N: int = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N: int = SECP256K1_N // 2

DOMAIN_TYPEHASH: bytes = keccak(
    text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
MESSAGE_TYPEHASH: bytes = keccak(text="AirdropClaim(address account,uint256 amount)")

DEFAULT_DOMAIN_NAME = "MerkleAirdrop"
DEFAULT_DOMAIN_VERSION = "1"


@dataclass(frozen=True)
class Signature:
    """
    A recoverable ECDSA signature split into its (v, r, s) components.

    v is stored as given; 27/28 and 0/1 are both understood by recovery.
    """
    v: int
    r: int
    s: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "Signature":
        """Split a 65-byte r || s || v signature."""
        if len(data) != 65:
            raise ValueError(f"Compact signature must be 65 bytes, got {len(data)}")
        return cls(
            v=data[64],
            r=int.from_bytes(data[0:32], "big"),
            s=int.from_bytes(data[32:64], "big"),
        )

    def to_bytes(self) -> bytes:
        """Join as r || s || v. Components must fit their widths."""
        return (
            self.r.to_bytes(32, "big")
            + self.s.to_bytes(32, "big")
            + bytes([self.v])
        )


@dataclass(frozen=True)
class EIP712Domain:
    """The signing domain that binds claim signatures to one airdrop deployment."""
    chain_id: int
    verifying_contract: str
    name: str = DEFAULT_DOMAIN_NAME
    version: str = DEFAULT_DOMAIN_VERSION

    @property
    def separator(self) -> bytes:
        return domain_separator(self)


def domain_separator(domain: EIP712Domain) -> bytes:
    """
    Compute the EIP-712 domain separator.

    Raises:
        InputException: If the verifying contract is not a valid address
            or the chain id is outside uint256
    """
    return keccak256(
        DOMAIN_TYPEHASH
        + keccak(text=domain.name)
        + keccak(text=domain.version)
        + encode_uint256(domain.chain_id)
        + encode_address(domain.verifying_contract)
    )


def claim_struct_hash(account: str, amount: int) -> bytes:
    """Hash of the AirdropClaim struct for (account, amount)."""
    return keccak256(MESSAGE_TYPEHASH + encode_address(account) + encode_uint256(amount))


def claim_digest(domain: EIP712Domain, account: str, amount: int) -> bytes:
    """
    Compute the domain-separated digest a claimer signs.

    Args:
        domain: Signing domain of the airdrop
        account: Claimer address
        amount: Entitlement in base units

    Returns:
        32-byte digest suitable for ECDSA signing/recovery
    """
    return keccak256(b"\x19\x01" + domain_separator(domain) + claim_struct_hash(account, amount))


def _normalize_v(v: int) -> Optional[int]:
    if isinstance(v, bool) or not isinstance(v, int):
        return None
    if v in (27, 28):
        return v - 27
    if v in (0, 1):
        return v
    return None


def recover_signer(digest: bytes, signature: Signature) -> Optional[str]:
    """
    Recover the checksummed address that produced signature over digest.

    Returns None instead of raising when:
    - digest is not 32 bytes
    - v is not one of 0, 1, 27, 28
    - r or s is outside [1, n)
    - s is in the upper half of the curve order (malleable form)
    - the components do not describe a recoverable point
    """
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != DIGEST_SIZE:
        return None

    v = _normalize_v(signature.v)
    if v is None:
        return None

    r, s = signature.r, signature.s
    for component in (r, s):
        if isinstance(component, bool) or not isinstance(component, int):
            return None
    if not (1 <= r < SECP256K1_N):
        return None
    if not (1 <= s <= SECP256K1_HALF_N):
        return None

    try:
        public_key = keys.Signature(vrs=(v, r, s)).recover_public_key_from_msg_hash(
            bytes(digest)
        )
    except (BadSignature, KeyValidationError, ValueError) as e:
        logger.debug(f"Signature recovery failed: {e}")
        return None

    return public_key.to_checksum_address()


def is_valid_signature(
    domain: EIP712Domain,
    claimer: str,
    amount: int,
    signature: Signature,
) -> bool:
    """
    Check that signature over (claimer, amount) was produced by claimer.

    Malformed claimers or amounts are reported as invalid, not raised.
    """
    try:
        expected = normalize_address(claimer)
        digest = claim_digest(domain, expected, amount)
    except InputException:
        return False

    recovered = recover_signer(digest, signature)
    return recovered is not None and recovered == expected


def sign_digest(private_key: bytes, digest: bytes) -> Signature:
    """Sign a 32-byte digest; v is returned in the 27/28 convention."""
    signed = keys.PrivateKey(private_key).sign_msg_hash(digest)
    return Signature(v=signed.v + 27, r=signed.r, s=signed.s)


def sign_claim(
    private_key: bytes,
    domain: EIP712Domain,
    account: str,
    amount: int,
) -> Signature:
    """
    Produce a claim signature off-chain.

    The recipient signs for their own address; an authorised relayer
    submits the claim on their behalf.
    """
    return sign_digest(private_key, claim_digest(domain, account, amount))


def address_of(private_key: bytes) -> str:
    """Checksummed address controlled by private_key."""
    return keys.PrivateKey(private_key).public_key.to_checksum_address()


class SignatureValidator:
    """
    Domain-bound validator used by the claim authority.

    Example:
        >>> validator = SignatureValidator(domain)
        >>> validator.is_valid(claimer, amount, signature)
        True
    """

    def __init__(self, domain: EIP712Domain):
        self.domain = domain
        self._separator = domain_separator(domain)

    @property
    def domain_separator(self) -> bytes:
        return self._separator

    def message_hash(self, account: str, amount: int) -> bytes:
        return keccak256(b"\x19\x01" + self._separator + claim_struct_hash(account, amount))

    def recover(self, account: str, amount: int, signature: Signature) -> Optional[str]:
        """Recover the signer of (account, amount), or None."""
        try:
            digest = self.message_hash(account, amount)
        except InputException:
            return None
        return recover_signer(digest, signature)

    def is_valid(self, claimer: str, amount: int, signature: Signature) -> bool:
        try:
            expected = normalize_address(claimer)
        except InputException:
            return False
        recovered = self.recover(expected, amount, signature)
        return recovered is not None and recovered == expected


__all__ = [
    "SECP256K1_N",
    "SECP256K1_HALF_N",
    "DOMAIN_TYPEHASH",
    "MESSAGE_TYPEHASH",
    "DEFAULT_DOMAIN_NAME",
    "DEFAULT_DOMAIN_VERSION",
    "Signature",
    "EIP712Domain",
    "domain_separator",
    "claim_struct_hash",
    "claim_digest",
    "recover_signer",
    "is_valid_signature",
    "sign_digest",
    "sign_claim",
    "address_of",
    "SignatureValidator",
]
