"""
Fungible-token collaborators.

TestERC20 follows the ERC-20 balance/allowance rules with the revert
strings of the reference token implementation, plus an unrestricted
set_balance helper for test setup. FalsyTestERC20 reports failure by
returning False from transfer instead of reverting.
"""

from __future__ import annotations

import logging

from eth_utils import to_checksum_address

from contracts.chain import ZERO_ADDRESS, Chain, Contract, external
from contracts.events import Approval, Transfer
from distributor.crypto.hashing import is_uint256
from distributor.schemas.errors import InvalidArgumentException, TokenRevert


logger = logging.getLogger(__name__)

REVERT_TRANSFER_EXCEEDS_BALANCE = "ERC20: transfer amount exceeds balance"
REVERT_TRANSFER_EXCEEDS_ALLOWANCE = "ERC20: transfer amount exceeds allowance"
REVERT_TRANSFER_FROM_ZERO = "ERC20: transfer from the zero address"
REVERT_TRANSFER_TO_ZERO = "ERC20: transfer to the zero address"
REVERT_APPROVE_TO_ZERO = "ERC20: approve to the zero address"


def _check_amount(amount: int) -> int:
    if not is_uint256(amount):
        raise InvalidArgumentException("amount", amount)
    return amount


class TestERC20(Contract):
    """ERC-20 token whose deployer receives the initial supply."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        chain: Chain,
        name: str,
        symbol: str,
        initial_balance: int = 0,
        owner: str | None = None,
    ) -> None:
        super().__init__(chain)
        self.name = name
        self.symbol = symbol
        self.decimals = 18
        self._balances: dict[str, int] = self.storage()
        self._allowances: dict[tuple[str, str], int] = self.storage()
        self.total_supply = 0
        if initial_balance:
            self._mint(to_checksum_address(owner or chain.default_account), initial_balance)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        return self._balances.get(to_checksum_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get(
            (to_checksum_address(owner), to_checksum_address(spender)), 0
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @external
    def set_balance(self, account: str, amount: int) -> None:
        """Overwrite a balance, adjusting total supply (test helper)."""
        account = to_checksum_address(account)
        _check_amount(amount)
        old = self._balances.get(account, 0)
        self._balances[account] = amount
        self.total_supply += amount - old

    @external
    def transfer(self, recipient: str, amount: int) -> bool:
        self._transfer(self.msg_sender, to_checksum_address(recipient), _check_amount(amount))
        return True

    @external
    def approve(self, spender: str, amount: int) -> bool:
        self._approve(self.msg_sender, to_checksum_address(spender), _check_amount(amount))
        return True

    @external
    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool:
        sender = to_checksum_address(sender)
        _check_amount(amount)
        self._transfer(sender, to_checksum_address(recipient), amount)

        allowed = self.allowance(sender, self.msg_sender)
        if amount > allowed:
            raise TokenRevert(REVERT_TRANSFER_EXCEEDS_ALLOWANCE)
        self._approve(sender, self.msg_sender, allowed - amount)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transfer(self, sender: str, recipient: str, amount: int) -> None:
        if sender == ZERO_ADDRESS:
            raise TokenRevert(REVERT_TRANSFER_FROM_ZERO)
        if recipient == ZERO_ADDRESS:
            raise TokenRevert(REVERT_TRANSFER_TO_ZERO)

        balance = self._balances.get(sender, 0)
        if amount > balance:
            raise TokenRevert(REVERT_TRANSFER_EXCEEDS_BALANCE)

        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        self.emit(Transfer(sender=sender, recipient=recipient, value=amount))
        logger.debug(f"{self.symbol}: {sender} -> {recipient} {amount}")

    def _approve(self, owner: str, spender: str, amount: int) -> None:
        if spender == ZERO_ADDRESS:
            raise TokenRevert(REVERT_APPROVE_TO_ZERO)
        self._allowances[(owner, spender)] = amount
        self.emit(Approval(owner=owner, spender=spender, value=amount))

    def _mint(self, account: str, amount: int) -> None:
        self._balances[account] = self._balances.get(account, 0) + _check_amount(amount)
        self.total_supply += amount
        self.emit(Transfer(sender=ZERO_ADDRESS, recipient=account, value=amount))


class FalsyTestERC20(TestERC20):
    """Token whose transfer never moves funds and returns False."""

    __test__ = False

    @external
    def transfer(self, recipient: str, amount: int) -> bool:
        return False


__all__ = [
    "REVERT_TRANSFER_EXCEEDS_BALANCE",
    "REVERT_TRANSFER_EXCEEDS_ALLOWANCE",
    "REVERT_TRANSFER_TO_ZERO",
    "TestERC20",
    "FalsyTestERC20",
]
