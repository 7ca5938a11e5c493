"""
Module 03 - Balance Trees
Merkle trees over (index, identifier, amount) entitlements.

This module provides:
- BalanceTree: address-keyed entitlements
- StringBalanceTree: string-keyed entitlements (identifier given as its hash)

Each tree assigns index = position in the given sequence. Callers that
need reproducible artifacts must sort identifiers first (see
distributor.balances).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from distributor.crypto.hashing import digest_from_hex, to_hex
from distributor.merkle.leaves import address_leaf, string_leaf
from distributor.merkle.merkle_tree import MerkleTree, process_proof


def _as_digest(value: bytes | str) -> bytes:
    if isinstance(value, str):
        return digest_from_hex(value)
    return bytes(value)


class _EntitlementTree(ABC):
    """Shared behaviour of the address- and string-keyed trees."""

    def __init__(self, balances: Sequence[tuple[Any, int]]) -> None:
        self._tree = MerkleTree(
            [self.to_node(index, identifier, amount)
             for index, (identifier, amount) in enumerate(balances)]
        )

    @staticmethod
    @abstractmethod
    def to_node(index: int, identifier: Any, amount: int) -> bytes:
        """Encode one entitlement as a leaf digest."""

    @classmethod
    def verify_proof(
        cls,
        index: int,
        identifier: Any,
        amount: int,
        proof: Sequence[bytes | str],
        root: bytes | str,
    ) -> bool:
        """
        Verify an entitlement against a root.

        Recomputes the leaf, folds the proof using the index bits and
        compares the result with ``root`` byte-for-byte.
        """
        leaf = cls.to_node(index, identifier, amount)
        siblings = [_as_digest(p) for p in proof]
        return process_proof(leaf, index, siblings) == _as_digest(root)

    @property
    def root(self) -> bytes:
        return self._tree.root

    @property
    def hex_root(self) -> str:
        return self._tree.hex_root

    @property
    def leaf_count(self) -> int:
        return self._tree.leaf_count

    def get_proof_bytes(self, index: int, identifier: Any, amount: int) -> list[bytes]:
        """
        Sibling path for the entitlement at ``index``.

        Raises:
            IndexError: If index is out of range
            ValueError: If (index, identifier, amount) is not the leaf at index
        """
        if index < 0 or index >= self._tree.leaf_count:
            raise IndexError(
                f"Leaf index {index} out of range for {self._tree.leaf_count} leaves"
            )
        if self._tree.leaf(index) != self.to_node(index, identifier, amount):
            raise ValueError(f"Entitlement does not match the leaf at index {index}")
        return self._tree.proof(index)

    def get_proof(self, index: int, identifier: Any, amount: int) -> list[str]:
        """Sibling path as 0x-prefixed hex strings, as published in artifacts."""
        return [to_hex(p) for p in self.get_proof_bytes(index, identifier, amount)]


class BalanceTree(_EntitlementTree):
    """
    Merkle tree over address-keyed entitlements.

    Example:
        >>> tree = BalanceTree([(alice, 100), (bob, 101)])
        >>> proof = tree.get_proof(0, alice, 100)
        >>> BalanceTree.verify_proof(0, alice, 100, proof, tree.root)
        True
    """

    @staticmethod
    def to_node(index: int, identifier: str | bytes, amount: int) -> bytes:
        return address_leaf(index, identifier, amount)


class StringBalanceTree(_EntitlementTree):
    """
    Merkle tree over string-keyed entitlements.

    Identifiers are given as their 32-byte keccak256 hash (bytes or 0x hex);
    use distributor.crypto.hash_identifier to hash raw strings.
    """

    @staticmethod
    def to_node(index: int, identifier: str | bytes, amount: int) -> bytes:
        return string_leaf(index, identifier, amount)


__all__ = [
    "BalanceTree",
    "StringBalanceTree",
]
