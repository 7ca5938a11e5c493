"""
Deterministic in-process execution environment for the distributor contracts.

This module provides:
- Chain: accounts, the call stack (msg.sender / tx.origin), the event log
  and all-or-nothing transactions
- Contract: base class for objects that live on a Chain
- StorageMap: dict for contract mappings whose writes can be rolled back
- external: decorator marking a contract method as a callable entry point
- make_address: deterministic checksum address from a label

Transaction rules:
1. An outermost external call is a transaction. While it runs, every
   state write is journaled: attribute assignments on a Contract, item
   writes on a StorageMap and deployments. Nothing is copied up front, so
   a call costs what it writes, not what the chain holds.
2. Every external call, outermost or nested, is a revert point. If it
   raises, the journal is undone back to the point where it started, the
   event log is truncated and the exception propagates. A caller that
   catches a nested revert keeps its own writes; the callee's are gone.
3. A nested external call (contract -> contract) runs with
   msg.sender = the calling contract and tx.origin unchanged.
4. Contract state lives in attributes (rebound, not mutated in place) and
   StorageMaps. In-place changes to other containers are not journaled.
   Contracts reference each other by address and resolve them with
   Chain.contract_at.

Usage:
    chain = Chain()
    alice = chain.accounts[1]
    token = TestERC20(chain, "Token", "TKN", 0)
    token.connect(alice).approve(spender, 10)
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, TypeVar

from eth_utils import to_checksum_address

from distributor.crypto.hashing import keccak256
from contracts.events import LogEntry


logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
DEFAULT_ACCOUNT_COUNT = 10

_MISSING = object()

F = TypeVar("F", bound=Callable[..., Any])
Undo = Callable[[], Any]


def make_address(label: str) -> str:
    """Checksum address derived from keccak256(label)."""
    return to_checksum_address(keccak256(label.encode("utf-8"))[-20:])


def _restore_entry(target: dict, key: Any, old: Any) -> None:
    if old is _MISSING:
        dict.pop(target, key, None)
    else:
        dict.__setitem__(target, key, old)


@dataclass(frozen=True)
class Frame:
    """One entry of the call stack."""
    contract: "Contract"
    sender: str
    origin: str


class Chain:
    """
    Single-threaded ledger of contracts, accounts and events.

    Every operation runs to completion before the next begins, so no
    locking is involved; atomicity comes from the write journal.
    """

    def __init__(self, account_count: int = DEFAULT_ACCOUNT_COUNT) -> None:
        if account_count < 1:
            raise ValueError("A chain needs at least one account")
        self.accounts: list[str] = [make_address(f"account:{i}") for i in range(account_count)]
        self.default_account: str = self.accounts[0]
        self.logs: list[LogEntry] = []
        self.last_tx_writes = 0
        self._contracts: dict[str, Contract] = {}
        self._frames: list[Frame] = []
        self._journal: Optional[list[Undo]] = None
        self._sender_override: Optional[str] = None
        self._deploy_nonce = 0

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register(self, contract: "Contract") -> str:
        """Assign an address to a newly constructed contract."""
        address = make_address(f"contract:{self._deploy_nonce}")
        self._deploy_nonce += 1
        self._contracts[address] = contract
        self._record(functools.partial(self._contracts.pop, address, None))
        logger.debug(f"Deployed {type(contract).__name__} at {address}")
        return address

    def contract_at(self, address: str) -> "Contract":
        """
        Resolve a contract by address.

        Raises:
            LookupError: If no contract lives at the address
        """
        try:
            return self._contracts[to_checksum_address(address)]
        except (KeyError, ValueError):
            raise LookupError(f"No contract at {address}") from None

    def is_contract(self, address: str) -> bool:
        try:
            return to_checksum_address(address) in self._contracts
        except ValueError:
            return False

    # ------------------------------------------------------------------
    # Call context
    # ------------------------------------------------------------------

    @property
    def in_call(self) -> bool:
        return bool(self._frames)

    @property
    def msg_sender(self) -> str:
        if not self._frames:
            raise RuntimeError("msg.sender is only defined inside an external call")
        return self._frames[-1].sender

    @property
    def tx_origin(self) -> str:
        if not self._frames:
            raise RuntimeError("tx.origin is only defined inside an external call")
        return self._frames[-1].origin

    @contextmanager
    def as_sender(self, account: str) -> Iterator[None]:
        """Send outermost calls made inside the block from ``account``."""
        previous = self._sender_override
        self._sender_override = to_checksum_address(account)
        try:
            yield
        finally:
            self._sender_override = previous

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def emit(self, address: str, event: object) -> None:
        self.logs.append(LogEntry(address=address, event=event))

    @property
    def events(self) -> list[object]:
        return [entry.event for entry in self.logs]

    def get_events(
        self,
        event_type: Optional[type] = None,
        address: Optional[str] = None,
    ) -> list[Any]:
        """Events filtered by type and/or emitting contract address."""
        return [
            entry.event
            for entry in self.logs
            if (event_type is None or isinstance(entry.event, event_type))
            and (address is None or entry.address == address)
        ]

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @property
    def in_transaction(self) -> bool:
        return self._journal is not None

    def _record(self, undo: Undo) -> None:
        if self._journal is not None:
            self._journal.append(undo)

    def journal_attribute(self, contract: "Contract", name: str) -> None:
        """Remember the current value of ``contract.<name>`` before a write."""
        if self._journal is not None:
            state = contract.__dict__
            self._journal.append(functools.partial(_restore_entry, state, name, state.get(name, _MISSING)))

    def journal_item(self, mapping: "StorageMap", key: Any) -> None:
        """Remember the current value of ``mapping[key]`` before a write."""
        if self._journal is not None:
            old = dict.get(mapping, key, _MISSING)
            self._journal.append(functools.partial(_restore_entry, mapping, key, old))

    def _revert_to(self, journal_length: int, log_length: int) -> None:
        journal = self._journal
        while len(journal) > journal_length:
            journal.pop()()
        del self.logs[log_length:]

    def call(self, contract: "Contract", method: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Run an external method of ``contract``.

        The outermost call opens a transaction; nested calls join the
        running one and can be reverted on their own.
        """
        if self._frames:
            caller = self._frames[-1]
            frame = Frame(contract=contract, sender=caller.contract.address, origin=caller.origin)
            return self._run(frame, method, args, kwargs)

        sender = self._sender_override or self.default_account
        frame = Frame(contract=contract, sender=sender, origin=sender)
        self._journal = []
        try:
            return self._run(frame, method, args, kwargs)
        finally:
            self.last_tx_writes = len(self._journal)
            self._journal = None

    def _run(self, frame: Frame, method: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
        journal_length, log_length = len(self._journal), len(self.logs)
        self._frames.append(frame)
        try:
            return method(frame.contract, *args, **kwargs)
        except Exception as e:
            self._revert_to(journal_length, log_length)
            logger.debug(
                f"Reverted {type(frame.contract).__name__}.{method.__name__} "
                f"from {frame.sender}: {e}"
            )
            raise
        finally:
            self._frames.pop()


class StorageMap(dict):
    """
    Contract mapping whose writes are journaled by ``chain``.

    Without a chain it is a plain dict. Reads are ordinary dict reads.
    """

    def __init__(self, chain: Optional[Chain] = None, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._chain = chain

    def __setitem__(self, key: Any, value: Any) -> None:
        if self._chain is not None:
            self._chain.journal_item(self, key)
        super().__setitem__(key, value)

    def __delitem__(self, key: Any) -> None:
        if self._chain is not None:
            self._chain.journal_item(self, key)
        super().__delitem__(key)

    def pop(self, key: Any, *default: Any) -> Any:
        if key in self and self._chain is not None:
            self._chain.journal_item(self, key)
        return super().pop(key, *default)

    def setdefault(self, key: Any, default: Any = None) -> Any:
        if key not in self:
            self[key] = default
        return self[key]

    def update(self, *args: Any, **kwargs: Any) -> None:
        for key, value in dict(*args, **kwargs).items():
            self[key] = value


def external(method: F) -> F:
    """Mark a contract method as an entry point that runs through Chain.call."""

    @functools.wraps(method)
    def wrapper(self: "Contract", *args: Any, **kwargs: Any) -> Any:
        return self.chain.call(self, method, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class Contract:
    """Base class for objects with an address and state on a Chain."""

    def __init__(self, chain: Chain) -> None:
        self.chain = chain
        self.address = chain.register(self)

    def __setattr__(self, name: str, value: Any) -> None:
        chain = self.__dict__.get("chain")
        if chain is not None:
            chain.journal_attribute(self, name)
        super().__setattr__(name, value)

    def storage(self) -> StorageMap:
        """New empty mapping journaled by this contract's chain."""
        return StorageMap(self.chain)

    @property
    def msg_sender(self) -> str:
        return self.chain.msg_sender

    @property
    def tx_origin(self) -> str:
        return self.chain.tx_origin

    def emit(self, event: object) -> None:
        self.chain.emit(self.address, event)

    def connect(self, account: str) -> "Connected":
        """View of this contract whose calls are sent from ``account``."""
        return Connected(self, account)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address!r})"


class Connected:
    """Proxy that sends every method call on the wrapped contract from one account."""

    def __init__(self, contract: Contract, account: str) -> None:
        self._contract = contract
        self._account = to_checksum_address(account)

    @property
    def address(self) -> str:
        return self._contract.address

    def __getattr__(self, name: str) -> Any:
        attribute = getattr(self._contract, name)
        if not callable(attribute):
            return attribute

        @functools.wraps(attribute)
        def send(*args: Any, **kwargs: Any) -> Any:
            with self._contract.chain.as_sender(self._account):
                return attribute(*args, **kwargs)

        return send


__all__ = [
    "ZERO_ADDRESS",
    "make_address",
    "Frame",
    "Chain",
    "StorageMap",
    "external",
    "Contract",
    "Connected",
]
