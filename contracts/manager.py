"""
Multi-campaign distribution registry.

Each campaign ("distribution") has a token, a Merkle root and a remaining
amount that only decreases. Campaigns share one contract and may share a
token, but their bitmaps and remaining amounts are independent: a claim
against one campaign is never paid from another campaign's share.

Claim order:
1. AlreadyClaimed if (distribution_id, index) is set
2. InsufficientRemaining if amount > remaining
3. InvalidProof if the proof does not fold to the campaign's root
4. Set the bit
5. Decrement remaining
6. Transfer to the recipient
7. Emit Claimed

State is written before the transfer, so a reentrant claim sees the bit
already set. A failed transfer reverts the whole transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Sequence

from eth_utils import to_checksum_address

from contracts.bitmap import CampaignClaimBitmap
from contracts.chain import ZERO_ADDRESS, Chain, Contract, external
from contracts.distributor import (
    ZERO_ROOT,
    proof_verifies,
    require_address,
    require_bytes32,
    require_uint64,
    require_uint256,
    safe_transfer,
    safe_transfer_from,
)
from contracts.events import Claimed, DistributionAdded
from distributor.merkle.balance_tree import BalanceTree, StringBalanceTree, _EntitlementTree
from distributor.merkle.leaves import normalize_address
from distributor.schemas.errors import (
    AlreadyClaimedException,
    InsufficientRemainingException,
    InvalidProofException,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Distribution:
    """Stored record of one campaign."""
    token: str
    merkle_root: bytes
    remaining_amount: int


EMPTY_DISTRIBUTION = Distribution(token=ZERO_ADDRESS, merkle_root=ZERO_ROOT, remaining_amount=0)


class MerkleDistributorManager(Contract):
    """Registry of address-keyed campaigns; ids start at 1 and are never reused."""

    balance_tree: type[_EntitlementTree] = BalanceTree

    def __init__(self, chain: Chain) -> None:
        super().__init__(chain)
        self.next_distribution_id = 1
        self._distributions: dict[int, Distribution] = self.storage()
        self._claimed = CampaignClaimBitmap(self.storage())

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def distribution(self, distribution_id: int) -> Distribution:
        """Campaign record; unknown ids read as the zero record."""
        return self._distributions.get(distribution_id, EMPTY_DISTRIBUTION)

    def token(self, distribution_id: int) -> str:
        return self.distribution(distribution_id).token

    def merkle_root(self, distribution_id: int) -> bytes:
        return self.distribution(distribution_id).merkle_root

    def remaining_amount(self, distribution_id: int) -> int:
        return self.distribution(distribution_id).remaining_amount

    def is_claimed(self, distribution_id: int, index: int) -> bool:
        return self._claimed.is_set(
            require_uint64("distribution_id", distribution_id),
            require_uint256("index", index),
        )

    def _recipient(self, identifier: Any) -> str:
        return normalize_address(identifier)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @external
    def add_distribution(
        self,
        token: Any,
        merkle_root: bytes | str,
        amount: int,
        extra: bytes = b"",
    ) -> int:
        """
        Create a campaign funded with ``amount`` pulled from the caller.

        The caller must have approved this contract for ``amount``.
        ``extra`` is opaque caller data and is not stored.

        Returns:
            The new distribution id

        Raises:
            TransferFailedException: If the token pull fails
        """
        token = require_address("token", token)
        root = require_bytes32("merkle_root", merkle_root)
        require_uint256("amount", amount)

        safe_transfer_from(self.chain, token, self.msg_sender, self.address, amount)

        distribution_id = self.next_distribution_id
        self._distributions[distribution_id] = Distribution(
            token=token, merkle_root=root, remaining_amount=amount
        )
        self.next_distribution_id += 1

        self.emit(DistributionAdded(
            distribution_id=distribution_id,
            token=token,
            merkle_root=root,
            amount=amount,
        ))
        logger.debug(f"Added distribution {distribution_id}: {amount} of {token}")
        return distribution_id

    @external
    def claim(
        self,
        distribution_id: int,
        index: int,
        identifier: Any,
        amount: int,
        proof: Sequence[bytes | str],
    ) -> None:
        """
        Redeem the entitlement at ``index`` of a campaign.

        Raises:
            AlreadyClaimedException: The index was already claimed in this campaign
            InsufficientRemainingException: amount exceeds what the campaign holds
            InvalidProofException: The proof does not verify against the campaign root
            TransferFailedException: The token transfer failed
        """
        require_uint64("distribution_id", distribution_id)
        require_uint256("index", index)
        require_uint256("amount", amount)

        if self._claimed.is_set(distribution_id, index):
            raise AlreadyClaimedException(index, distribution_id)

        distribution = self.distribution(distribution_id)
        if amount > distribution.remaining_amount:
            raise InsufficientRemainingException(
                distribution_id, amount, distribution.remaining_amount
            )
        if not proof_verifies(
            self.balance_tree, index, identifier, amount, proof, distribution.merkle_root
        ):
            raise InvalidProofException(index)

        self._claimed.set(distribution_id, index)
        self._distributions[distribution_id] = replace(
            distribution, remaining_amount=distribution.remaining_amount - amount
        )

        account = self._recipient(identifier)
        safe_transfer(self.chain, distribution.token, account, amount)

        self.emit(Claimed(
            index=index,
            account=account,
            amount=amount,
            distribution_id=distribution_id,
        ))
        logger.debug(
            f"Distribution {distribution_id}: claimed index {index}, {amount} to {account}"
        )


class StringMerkleDistributorManager(MerkleDistributorManager):
    """Registry of string-keyed campaigns; claims pay the transaction origin."""

    balance_tree = StringBalanceTree

    def _recipient(self, identifier: Any) -> str:
        return to_checksum_address(self.tx_origin)


__all__ = [
    "Distribution",
    "EMPTY_DISTRIBUTION",
    "MerkleDistributorManager",
    "StringMerkleDistributorManager",
]
