"""
Module 02 - Cryptographic Primitives

Keccak-256 hashing and hex helpers shared by the Merkle tree,
the leaf encoders and the distributor contracts.
"""
from .hashing import (
    DIGEST_SIZE,
    UINT256_MAX,
    digest_from_hex,
    from_hex,
    hash_concat,
    hash_identifier,
    is_uint256,
    keccak256,
    parse_quantity,
    to_hex,
    to_hex_quantity,
)

__all__ = [
    "DIGEST_SIZE",
    "UINT256_MAX",
    "digest_from_hex",
    "from_hex",
    "hash_concat",
    "hash_identifier",
    "is_uint256",
    "keccak256",
    "parse_quantity",
    "to_hex",
    "to_hex_quantity",
]
