"""
Distributor contracts and their execution environment.

Usage:
    from contracts import Chain, TestERC20, MerkleDistributorManager

    chain = Chain()
    token = TestERC20(chain, "Token", "TKN", 0)
    manager = MerkleDistributorManager(chain)
"""

from .bitmap import WORD_BITS, CampaignClaimBitmap, ClaimBitmap
from .chain import ZERO_ADDRESS, Chain, Connected, Contract, external, make_address
from .distributor import MerkleDistributor, StringMerkleDistributor
from .events import (
    Approval,
    Claimed,
    DistributionAdded,
    LogEntry,
    Proven,
    Transfer,
    TreeAdded,
)
from .manager import (
    EMPTY_DISTRIBUTION,
    Distribution,
    MerkleDistributorManager,
    StringMerkleDistributorManager,
)
from .token import FalsyTestERC20, TestERC20
from .tree_manager import MerkleTreeManager, StringMerkleTreeManager

__all__ = [
    # Environment
    "ZERO_ADDRESS",
    "Chain",
    "Connected",
    "Contract",
    "external",
    "make_address",
    # Bitmaps
    "WORD_BITS",
    "ClaimBitmap",
    "CampaignClaimBitmap",
    # Events
    "Approval",
    "Claimed",
    "DistributionAdded",
    "LogEntry",
    "Proven",
    "Transfer",
    "TreeAdded",
    # Tokens
    "TestERC20",
    "FalsyTestERC20",
    # Distributors
    "MerkleDistributor",
    "StringMerkleDistributor",
    "Distribution",
    "EMPTY_DISTRIBUTION",
    "MerkleDistributorManager",
    "StringMerkleDistributorManager",
    "MerkleTreeManager",
    "StringMerkleTreeManager",
]
