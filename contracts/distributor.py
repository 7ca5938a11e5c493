"""
Single-campaign Merkle distributors.

This module provides:
- MerkleDistributor: one token, one root, address-keyed claims
- StringMerkleDistributor: same, keyed by identifier hash; pays tx.origin
- Helpers shared with the multi-campaign contracts (argument checks,
  proof checks, token transfers that surface failure as TransferFailed)

Claim order:
1. AlreadyClaimed if the index bit is set
2. InvalidProof if the proof does not fold to the stored root
3. Set the index bit
4. Transfer from the distributor's own balance
5. Emit Claimed

There is no remaining-amount ledger here; the token's own balance check
is what bounds the total paid out.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from eth_utils import to_checksum_address

from contracts.bitmap import ClaimBitmap
from contracts.chain import Chain, Contract, external
from contracts.events import Claimed
from distributor.crypto.hashing import DIGEST_SIZE, is_uint256
from distributor.merkle.balance_tree import BalanceTree, StringBalanceTree, _EntitlementTree
from distributor.merkle.leaves import normalize_address, normalize_identifier_hash
from distributor.schemas.errors import (
    AlreadyClaimedException,
    InvalidArgumentException,
    InvalidProofException,
    TokenRevert,
    TransferFailedException,
)


logger = logging.getLogger(__name__)

UINT64_MAX = 2**64 - 1
ZERO_ROOT = bytes(DIGEST_SIZE)


# =============================================================================
# Shared helpers
# =============================================================================

def require_uint256(name: str, value: Any) -> int:
    if not is_uint256(value):
        raise InvalidArgumentException(name, value)
    return value


def require_uint64(name: str, value: Any) -> int:
    if not is_uint256(value) or value > UINT64_MAX:
        raise InvalidArgumentException(name, value)
    return value


def require_address(name: str, value: Any) -> str:
    """Checksum address of an account, a contract, or a connected contract."""
    value = getattr(value, "address", value)
    try:
        return normalize_address(value)
    except ValueError:
        raise InvalidArgumentException(name, value) from None


def require_bytes32(name: str, value: Any) -> bytes:
    try:
        return normalize_identifier_hash(value)
    except (TypeError, ValueError):
        raise InvalidArgumentException(name, value) from None


def proof_verifies(
    tree_cls: type[_EntitlementTree],
    index: int,
    identifier: Any,
    amount: int,
    proof: Sequence[bytes | str],
    root: bytes,
) -> bool:
    """Fold ``proof`` for the entitlement; malformed input never verifies."""
    try:
        return tree_cls.verify_proof(index, identifier, amount, proof, root)
    except (TypeError, ValueError):
        return False


def _resolve_token(chain: Chain, token: str) -> Any:
    try:
        return chain.contract_at(token)
    except LookupError:
        raise TransferFailedException(token, "no contract at token address") from None


def safe_transfer(chain: Chain, token: str, recipient: str, amount: int) -> None:
    """
    Transfer ``amount`` of ``token`` from the calling contract.

    Raises:
        TransferFailedException: If the token reverts or returns False
    """
    token_contract = _resolve_token(chain, token)
    try:
        ok = token_contract.transfer(recipient, amount)
    except TokenRevert as e:
        raise TransferFailedException(token, e.reason) from e
    if ok is not True:
        raise TransferFailedException(token, "transfer returned false")


def safe_transfer_from(chain: Chain, token: str, sender: str, recipient: str, amount: int) -> None:
    """
    Pull ``amount`` of ``token`` from ``sender`` using the caller's allowance.

    Raises:
        TransferFailedException: If the token reverts or returns False
    """
    token_contract = _resolve_token(chain, token)
    try:
        ok = token_contract.transfer_from(sender, recipient, amount)
    except TokenRevert as e:
        raise TransferFailedException(token, e.reason) from e
    if ok is not True:
        raise TransferFailedException(token, "transferFrom returned false")


# =============================================================================
# Distributors
# =============================================================================

class MerkleDistributor(Contract):
    """
    Distributes one token to the address-keyed entitlements under one root.

    The distributor must hold enough tokens; fund it with a plain
    transfer (or set_balance on a test token) after deployment.
    """

    balance_tree: type[_EntitlementTree] = BalanceTree

    def __init__(self, chain: Chain, token: Any, merkle_root: bytes | str) -> None:
        super().__init__(chain)
        self.token = require_address("token", token)
        self.merkle_root = require_bytes32("merkle_root", merkle_root)
        self._claimed = ClaimBitmap(self.storage())

    def is_claimed(self, index: int) -> bool:
        return self._claimed.is_set(require_uint256("index", index))

    def _recipient(self, identifier: Any) -> str:
        return normalize_address(identifier)

    @external
    def claim(
        self,
        index: int,
        identifier: Any,
        amount: int,
        proof: Sequence[bytes | str],
    ) -> None:
        """
        Redeem the entitlement at ``index``.

        Raises:
            AlreadyClaimedException: The index was already claimed
            InvalidProofException: The proof does not verify
            TransferFailedException: The token transfer failed
        """
        require_uint256("index", index)
        require_uint256("amount", amount)

        if self._claimed.is_set(index):
            raise AlreadyClaimedException(index)
        if not proof_verifies(self.balance_tree, index, identifier, amount, proof, self.merkle_root):
            raise InvalidProofException(index)

        self._claimed.set(index)
        account = self._recipient(identifier)
        safe_transfer(self.chain, self.token, account, amount)

        self.emit(Claimed(index=index, account=account, amount=amount))
        logger.debug(f"Claimed index {index}: {amount} to {account}")


class StringMerkleDistributor(MerkleDistributor):
    """
    Distributes one token to string-keyed entitlements.

    ``identifier`` is the 32-byte hash of the off-chain string; tokens
    go to the transaction origin, since the string names no account.
    """

    balance_tree = StringBalanceTree

    def _recipient(self, identifier: Any) -> str:
        return to_checksum_address(self.tx_origin)


__all__ = [
    "UINT64_MAX",
    "ZERO_ROOT",
    "require_uint256",
    "require_uint64",
    "require_address",
    "require_bytes32",
    "proof_verifies",
    "safe_transfer",
    "safe_transfer_from",
    "MerkleDistributor",
    "StringMerkleDistributor",
]
