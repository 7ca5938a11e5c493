"""
Module 04 - Address Balance Map Parser

Turns {address: amount} into the published distribution artifact:
sorted checksum addresses, index = sorted position, one proof per address.
"""
from __future__ import annotations

import logging
from typing import Sequence

from distributor.balances.normalize import Entitlement, NewFormat, OldFormat, normalize_balances
from distributor.crypto.hashing import to_hex_quantity
from distributor.merkle.balance_tree import BalanceTree, _EntitlementTree
from distributor.merkle.leaves import normalize_address
from distributor.schemas.distribution import ClaimInfo, MerkleDistributorInfo


logger = logging.getLogger(__name__)


def build_distributor_info(
    entitlements: Sequence[Entitlement],
    tree_cls: type[_EntitlementTree],
) -> MerkleDistributorInfo:
    """
    Build the tree over sorted entitlements and emit root, total and claims.

    ``entitlements`` must already be validated and sorted; their position
    becomes the leaf index.
    """
    tree = tree_cls([(e.identifier, e.amount) for e in entitlements])

    claims: dict[str, ClaimInfo] = {}
    token_total = 0
    for index, entitlement in enumerate(entitlements):
        claims[entitlement.identifier] = ClaimInfo(
            index=index,
            amount=to_hex_quantity(entitlement.amount),
            proof=tree.get_proof(index, entitlement.identifier, entitlement.amount),
            flags=entitlement.flags,
        )
        token_total += entitlement.amount

    logger.info(
        f"Built {tree_cls.__name__} over {len(entitlements)} entitlements, "
        f"root {tree.hex_root}, total {token_total}"
    )

    return MerkleDistributorInfo(
        merkle_root=tree.hex_root,
        token_total=to_hex_quantity(token_total),
        claims=claims,
    )


def parse_balance_map(balances: OldFormat | NewFormat) -> MerkleDistributorInfo:
    """
    Parse an address-keyed balance map.

    Accepts {address: amount} or [{"address", "earnings", "reasons"}].
    Addresses are checksummed before duplicate detection and sorting.

    Raises:
        BalanceMapException: On any invalid entry; no artifact is produced
    """
    entitlements = normalize_balances(balances, "address", normalize_address)
    return build_distributor_info(entitlements, BalanceTree)


__all__ = [
    "build_distributor_info",
    "parse_balance_map",
]
