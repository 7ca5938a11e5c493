"""
Module 02 - Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Keccak-256 hashing for raw bytes (the EVM's keccak256)
- Identifier hashing for string-keyed entitlements
- Hex encoding/decoding with 0x prefix
- Quantity encoding (even-length 0x hex for uint256 amounts)

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- Strings are hashed as their UTF-8 bytes, matching keccak256(bytes(s))
- All operations are deterministic
"""
from __future__ import annotations

import re

from eth_utils import keccak


UINT256_MAX: int = 2**256 - 1

DIGEST_SIZE: int = 32

_DECIMAL_QUANTITY = re.compile(r"-?[0-9]+")
_HEX_QUANTITY = re.compile(r"0x[0-9a-fA-F]+")


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
    return keccak(primitive=data)


def hash_identifier(raw: str) -> bytes:
    """
    Hash a string identifier (e.g. a UUID) to a 32-byte digest.

    Rule: identifier_hash = keccak256(utf8(raw))

    The raw string never travels inside a leaf; only this digest does.
    """
    if not isinstance(raw, str):
        raise TypeError(f"Identifier must be a string, got {type(raw).__name__}")
    return keccak256(raw.encode("utf-8"))


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is used for computing Merkle parent hashes:
    parent = keccak256(left + right)
    """
    return keccak256(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
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
    """Decode a 0x-prefixed 32-byte digest, rejecting any other length."""
    data = from_hex(hex_string)
    if len(data) != DIGEST_SIZE:
        raise ValueError(
            f"Digest must be {DIGEST_SIZE} bytes, got {len(data)}"
        )
    return data


def to_hex_quantity(value: int) -> str:
    """
    Encode a non-negative integer as even-length 0x hex.

    This is the amount encoding used in published distribution artifacts.

    Example:
        >>> to_hex_quantity(750)
        '0x02ee'
        >>> to_hex_quantity(200)
        '0xc8'
    """
    if value < 0:
        raise ValueError(f"Quantity must be non-negative, got {value}")
    digits = format(value, "x")
    if len(digits) % 2:
        digits = "0" + digits
    return "0x" + digits


def parse_quantity(value: int | str) -> int:
    """
    Parse an amount given as int, decimal string, or 0x hex string.

    Strings must be bare digits: no whitespace, underscores or "0X".

    Raises:
        ValueError: If the value is not an integer representation
        TypeError: If the value has an unsupported type
    """
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid quantity")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if _HEX_QUANTITY.fullmatch(value):
            return int(value[2:], 16)
        if _DECIMAL_QUANTITY.fullmatch(value):
            return int(value, 10)
        raise ValueError(f"Not an integer quantity: {value!r}")
    raise TypeError(f"Unsupported quantity type: {type(value).__name__}")


def is_uint256(value: int) -> bool:
    """Check that an int fits the EVM uint256 range."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= UINT256_MAX


__all__ = [
    "UINT256_MAX",
    "DIGEST_SIZE",
    "keccak256",
    "hash_identifier",
    "hash_concat",
    "to_hex",
    "from_hex",
    "digest_from_hex",
    "to_hex_quantity",
    "parse_quantity",
    "is_uint256",
]
