"""
Token-less proof-of-inclusion registries.

A tree manager stores Merkle roots and records, once per (tree, index),
that an entitlement was proven against them. It moves no tokens.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from eth_utils import to_checksum_address

from contracts.bitmap import CampaignClaimBitmap
from contracts.chain import Chain, Contract, external
from contracts.distributor import (
    ZERO_ROOT,
    proof_verifies,
    require_bytes32,
    require_uint64,
    require_uint256,
)
from contracts.events import Proven, TreeAdded
from distributor.merkle.balance_tree import BalanceTree, StringBalanceTree, _EntitlementTree
from distributor.merkle.leaves import normalize_address
from distributor.schemas.errors import (
    REVERT_TREE_INVALID_PROOF,
    AlreadyProvenException,
    InvalidProofException,
)


logger = logging.getLogger(__name__)


class MerkleTreeManager(Contract):
    """Registry of address-keyed trees; ids start at 1."""

    balance_tree: type[_EntitlementTree] = BalanceTree

    def __init__(self, chain: Chain) -> None:
        super().__init__(chain)
        self.next_tree_id = 1
        self._roots: dict[int, bytes] = self.storage()
        self._proven = CampaignClaimBitmap(self.storage())

    def merkle_root(self, tree_id: int) -> bytes:
        return self._roots.get(tree_id, ZERO_ROOT)

    def is_proven(self, tree_id: int, index: int) -> bool:
        return self._proven.is_set(
            require_uint64("tree_id", tree_id),
            require_uint256("index", index),
        )

    def _account(self, identifier: Any) -> str:
        return normalize_address(identifier)

    @external
    def add_tree(self, merkle_root: bytes | str) -> int:
        root = require_bytes32("merkle_root", merkle_root)
        tree_id = self.next_tree_id
        self._roots[tree_id] = root
        self.next_tree_id += 1
        self.emit(TreeAdded(tree_id=tree_id, merkle_root=root))
        logger.debug(f"Added tree {tree_id}")
        return tree_id

    @external
    def prove(
        self,
        tree_id: int,
        index: int,
        identifier: Any,
        amount: int,
        proof: Sequence[bytes | str],
    ) -> None:
        """
        Record that the entitlement at ``index`` is included in a tree.

        Raises:
            AlreadyProvenException: The index was already proven for this tree
            InvalidProofException: The proof does not verify
        """
        require_uint64("tree_id", tree_id)
        require_uint256("index", index)
        require_uint256("amount", amount)

        if self._proven.is_set(tree_id, index):
            raise AlreadyProvenException(tree_id, index)
        if not proof_verifies(
            self.balance_tree, index, identifier, amount, proof, self.merkle_root(tree_id)
        ):
            raise InvalidProofException(index, reason=REVERT_TREE_INVALID_PROOF)

        self._proven.set(tree_id, index)
        account = self._account(identifier)
        self.emit(Proven(tree_id=tree_id, index=index, account=account, amount=amount))
        logger.debug(f"Tree {tree_id}: proven index {index} for {account}")


class StringMerkleTreeManager(MerkleTreeManager):
    """Registry of string-keyed trees; proofs are attributed to the transaction origin."""

    balance_tree = StringBalanceTree

    def _account(self, identifier: Any) -> str:
        return to_checksum_address(self.tx_origin)


__all__ = [
    "MerkleTreeManager",
    "StringMerkleTreeManager",
]
