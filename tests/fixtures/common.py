"""
Common test fixtures shared by all modules.

Provides factory functions for the core distributor objects:
- Chain and tokens
- Leaf lists and balance trees
- String identifiers with their known hashes

These are the building blocks used by the contract and parser tests.
"""

from typing import Optional

from contracts import Chain, FalsyTestERC20, TestERC20
from distributor.crypto import hash_identifier, keccak256, to_hex
from distributor.merkle import BalanceTree, StringBalanceTree


ZERO_BYTES32 = "0x" + "00" * 32

# keccak256(utf8(uuid)) for identifiers used by published artifacts
KNOWN_IDENTIFIER_HASHES = {
    "6ccbe73b-2166-4109-816a-193c9dde9a14":
        "0x6a6453940381804fa6671a1f1cd3f295f83d751339ed0d8930654d4cdfa5ad75",
    "71feb404-7871-4f30-b869-7d68c99f188b":
        "0x9ca955ecc2d281be4ed5348b0f7a79b263afd8b58d1cf5dbf34e8f53c5443184",
    "23d6ba35-35bf-4de3-b21c-957504a645b1":
        "0x1cca01e19858aa423f2195b7e5d071436f19a0cd0c1bf853e18e0ebf78328e5d",
}

# Hashed balance map whose artifact totals 750 (0x02ee)
KNOWN_STRING_BALANCES = {
    "0x6a6453940381804fa6671a1f1cd3f295f83d751339ed0d8930654d4cdfa5ad75": 200,
    "0x9ca955ecc2d281be4ed5348b0f7a79b263afd8b58d1cf5dbf34e8f53c5443184": 300,
    "0x1cca01e19858aa423f2195b7e5d071436f19a0cd0c1bf853e18e0ebf78328e5d": 250,
}


# =============================================================================
# Leaves and Trees
# =============================================================================

def make_leaves(count: int, prefix: str = "leaf") -> list[bytes]:
    """Distinct 32-byte leaves: keccak256("<prefix>-<i>")."""
    return [keccak256(f"{prefix}-{i}".encode()) for i in range(count)]


def make_uuid(i: int) -> str:
    """Deterministic UUID-shaped identifier."""
    return f"00000000-0000-4000-8000-{i:012d}"


def make_string_identifiers(count: int) -> list[tuple[str, str]]:
    """(raw, 0x hash) pairs for ``count`` identifiers."""
    return [
        (make_uuid(i), to_hex(hash_identifier(make_uuid(i))))
        for i in range(count)
    ]


def make_two_leaf_tree(account0: str, account1: str) -> BalanceTree:
    """Two-leaf address tree: account0 -> 100, account1 -> 101."""
    return BalanceTree([(account0, 100), (account1, 101)])


def make_two_leaf_string_tree(hash0: str, hash1: str) -> StringBalanceTree:
    """Two-leaf string tree: hash0 -> 100, hash1 -> 101."""
    return StringBalanceTree([(hash0, 100), (hash1, 101)])


# =============================================================================
# Chain and Tokens
# =============================================================================

def make_chain(account_count: int = 10) -> Chain:
    return Chain(account_count=account_count)


def make_token(
    chain: Chain,
    name: str = "Token",
    symbol: str = "TKN",
    initial_balance: int = 0,
    owner: Optional[str] = None,
) -> TestERC20:
    return TestERC20(chain, name, symbol, initial_balance, owner=owner)


def make_falsy_token(chain: Chain) -> FalsyTestERC20:
    return FalsyTestERC20(chain, "FalsyToken", "FLS", 0)


def fund_and_approve(token: TestERC20, owner: str, spender: str, amount: int) -> None:
    """Give ``owner`` exactly ``amount`` tokens and approve ``spender`` for them."""
    token.set_balance(owner, amount)
    token.connect(owner).approve(spender, amount)
