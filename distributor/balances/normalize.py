"""
Module 04 - Balance Map Normalization

Collapses the accepted input shapes into one sorted list of entitlements
at the parse boundary:

- Old format: {identifier: amount}, amount as int, decimal string or 0x hex
- New format: [{"<key>": identifier, "earnings": amount, "reasons": "a,b"}]

Validation is fail-fast: the first invalid entry aborts normalization.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Sequence, Union

from distributor.crypto.hashing import UINT256_MAX, parse_quantity
from distributor.schemas.errors import (
    DuplicateIdentifierException,
    EmptyBalanceMapException,
    InvalidAmountException,
    InvalidIdentifierException,
    NonPositiveAmountException,
)


OldFormat = Mapping[str, Union[int, str]]
NewFormat = Sequence[Mapping[str, Any]]


@dataclass(frozen=True)
class Entitlement:
    """One validated (identifier, amount) pair."""
    identifier: str
    amount: int
    reasons: str = ""

    @property
    def flags(self) -> dict[str, bool] | None:
        """Reasons as flags, or None when no reasons were given."""
        if not self.reasons:
            return None
        return {r.strip(): True for r in self.reasons.split(",") if r.strip()}


def _iter_entries(
    balances: OldFormat | NewFormat,
    key_field: str,
) -> Iterator[tuple[Any, Any, str]]:
    if isinstance(balances, Mapping):
        for identifier, amount in balances.items():
            yield identifier, amount, ""
        return

    if isinstance(balances, (list, tuple)):
        for position, entry in enumerate(balances):
            if not isinstance(entry, Mapping) or key_field not in entry:
                raise InvalidIdentifierException(
                    entry, reason=f"entry {position} has no '{key_field}' field"
                )
            yield entry[key_field], entry.get("earnings"), entry.get("reasons") or ""
        return

    raise TypeError(
        f"Balance map must be a mapping or a list of entries, got {type(balances).__name__}"
    )


def _parse_amount(identifier: str, raw_amount: Any) -> int:
    try:
        amount = parse_quantity(raw_amount)
    except (TypeError, ValueError) as e:
        raise InvalidAmountException(identifier, raw_amount) from e
    if amount <= 0:
        raise NonPositiveAmountException(identifier, amount)
    if amount > UINT256_MAX:
        raise InvalidAmountException(identifier, raw_amount)
    return amount


def normalize_balances(
    balances: OldFormat | NewFormat,
    key_field: str,
    normalize_identifier: Callable[[Any], str],
) -> list[Entitlement]:
    """
    Validate a balance map and return its entitlements sorted by identifier.

    Args:
        balances: Old- or new-format balance map
        key_field: Identifier field name for new-format entries
        normalize_identifier: Maps a raw identifier to its canonical string;
            raises ValueError for invalid identifiers

    Raises:
        InvalidIdentifierException, DuplicateIdentifierException,
        NonPositiveAmountException, InvalidAmountException,
        EmptyBalanceMapException
    """
    by_identifier: dict[str, Entitlement] = {}

    for raw_identifier, raw_amount, reasons in _iter_entries(balances, key_field):
        try:
            identifier = normalize_identifier(raw_identifier)
        except (TypeError, ValueError) as e:
            raise InvalidIdentifierException(raw_identifier, reason=str(e)) from e

        if identifier in by_identifier:
            raise DuplicateIdentifierException(identifier)

        by_identifier[identifier] = Entitlement(
            identifier=identifier,
            amount=_parse_amount(identifier, raw_amount),
            reasons=reasons,
        )

    if not by_identifier:
        raise EmptyBalanceMapException()

    return [by_identifier[identifier] for identifier in sorted(by_identifier)]


__all__ = [
    "OldFormat",
    "NewFormat",
    "Entitlement",
    "normalize_balances",
]
