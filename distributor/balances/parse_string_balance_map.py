"""
Module 04 - String Balance Map Parser

Turns {identifier_hash: amount} into the published distribution artifact.
Keys are keccak256 hashes of the raw string identifiers (e.g. UUIDs);
with ``hash_keys=True`` raw strings are accepted and hashed here.
"""
from __future__ import annotations

from typing import Any

from distributor.balances.normalize import NewFormat, OldFormat, normalize_balances
from distributor.balances.parse_balance_map import build_distributor_info
from distributor.crypto.hashing import hash_identifier, to_hex
from distributor.merkle.balance_tree import StringBalanceTree
from distributor.merkle.leaves import normalize_identifier_hash
from distributor.schemas.distribution import MerkleDistributorInfo


def normalize_hashed_identifier(identifier: Any) -> str:
    """Canonical form of an identifier hash: lowercase 0x + 64 hex."""
    return to_hex(normalize_identifier_hash(identifier))


def _hash_raw_identifier(identifier: Any) -> str:
    return to_hex(hash_identifier(identifier))


def parse_string_balance_map(
    balances: OldFormat | NewFormat,
    hash_keys: bool = False,
) -> MerkleDistributorInfo:
    """
    Parse a string-keyed balance map.

    Accepts {hashed: amount} or [{"hashed", "earnings", "reasons"}].

    Args:
        balances: Balance map keyed by identifier hash
        hash_keys: Treat keys as raw strings and hash them first

    Raises:
        BalanceMapException: On any invalid entry; no artifact is produced
    """
    normalize = _hash_raw_identifier if hash_keys else normalize_hashed_identifier
    entitlements = normalize_balances(balances, "hashed", normalize)
    return build_distributor_info(entitlements, StringBalanceTree)


__all__ = [
    "normalize_hashed_identifier",
    "parse_string_balance_map",
]
