"""
Module 03 - Leaf Encoders

Both encoders produce a 32-byte digest from (index, identifier, amount):

- Address-keyed: keccak256(abi.encodePacked(uint256 index, address account, uint256 amount))
- String-keyed:  keccak256(abi.encodePacked(uint256 index, bytes32 identifierHash, uint256 amount))
  where identifierHash = keccak256(utf8(raw identifier))

The tuple-hash construction is shared; only the meaning of the
identifier differs.
"""
from __future__ import annotations

from eth_abi.packed import encode_packed
from eth_utils import is_address, to_checksum_address

from distributor.crypto.hashing import DIGEST_SIZE, digest_from_hex, is_uint256, keccak256


def _require_uint256(name: str, value: int) -> None:
    if not is_uint256(value):
        raise ValueError(f"{name} must be a uint256, got {value!r}")


def normalize_address(account: str | bytes) -> str:
    """
    Return the EIP-55 checksum form of an address.

    Raises:
        ValueError: If the value is not a 20-byte address
    """
    if isinstance(account, (bytes, bytearray)):
        if len(account) != 20:
            raise ValueError(f"Address must be 20 bytes, got {len(account)}")
        return to_checksum_address(bytes(account))
    if not isinstance(account, str) or not is_address(account):
        raise ValueError(f"Invalid address: {account!r}")
    return to_checksum_address(account)


def normalize_identifier_hash(identifier_hash: str | bytes) -> bytes:
    """Accept a 32-byte digest as bytes or 0x hex and return the bytes."""
    if isinstance(identifier_hash, (bytes, bytearray)):
        if len(identifier_hash) != DIGEST_SIZE:
            raise ValueError(
                f"Identifier hash must be {DIGEST_SIZE} bytes, got {len(identifier_hash)}"
            )
        return bytes(identifier_hash)
    return digest_from_hex(identifier_hash)


def address_leaf(index: int, account: str | bytes, amount: int) -> bytes:
    """Leaf digest for an address-keyed entitlement."""
    _require_uint256("index", index)
    _require_uint256("amount", amount)
    return keccak256(
        encode_packed(
            ["uint256", "address", "uint256"],
            [index, normalize_address(account), amount],
        )
    )


def string_leaf(index: int, identifier_hash: str | bytes, amount: int) -> bytes:
    """Leaf digest for a string-keyed entitlement, given the identifier's hash."""
    _require_uint256("index", index)
    _require_uint256("amount", amount)
    return keccak256(
        encode_packed(
            ["uint256", "bytes32", "uint256"],
            [index, normalize_identifier_hash(identifier_hash), amount],
        )
    )


__all__ = [
    "normalize_address",
    "normalize_identifier_hash",
    "address_leaf",
    "string_leaf",
]
