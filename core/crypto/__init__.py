"""
Core cryptographic utilities.

Module 02 provides hashing and the record codec.
Module 03 provides claim signatures (EIP-712 digests, signer recovery).
"""
from .hashing import (
    DIGEST_SIZE,
    ZERO_HASH,
    keccak256,
    hash_bytes,
    double_hash,
    hash_concat,
    is_digest,
    to_hex,
    from_hex,
    digest_from_hex,
)
from .codec import (
    UINT256_MAX,
    normalize_address,
    validate_amount,
    encode_address,
    encode_uint256,
    encode_record,
    encode_pair,
)
from .signatures import (
    Signature,
    EIP712Domain,
    SignatureValidator,
    domain_separator,
    claim_digest,
    recover_signer,
    is_valid_signature,
    sign_claim,
    address_of,
)

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
    "UINT256_MAX",
    "normalize_address",
    "validate_amount",
    "encode_address",
    "encode_uint256",
    "encode_record",
    "encode_pair",
    "Signature",
    "EIP712Domain",
    "SignatureValidator",
    "domain_separator",
    "claim_digest",
    "recover_signer",
    "is_valid_signature",
    "sign_claim",
    "address_of",
]
