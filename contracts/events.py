"""
Contract events.

Events are immutable records appended to Chain.logs by the emitting
contract. They are the only observable outcome of a successful call
besides state changes; a reverted transaction leaves none behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Transfer:
    sender: str
    recipient: str
    value: int


@dataclass(frozen=True)
class Approval:
    owner: str
    spender: str
    value: int


@dataclass(frozen=True)
class Claimed:
    """
    A claim succeeded.

    ``distribution_id`` is None for the single-campaign distributors.
    """
    index: int
    account: str
    amount: int
    distribution_id: Optional[int] = None


@dataclass(frozen=True)
class DistributionAdded:
    distribution_id: int
    token: str
    merkle_root: bytes
    amount: int


@dataclass(frozen=True)
class TreeAdded:
    tree_id: int
    merkle_root: bytes


@dataclass(frozen=True)
class Proven:
    tree_id: int
    index: int
    account: str
    amount: int


@dataclass(frozen=True)
class LogEntry:
    """An event together with the address of the contract that emitted it."""
    address: str
    event: object


__all__ = [
    "Transfer",
    "Approval",
    "Claimed",
    "DistributionAdded",
    "TreeAdded",
    "Proven",
    "LogEntry",
]
