"""
Module 04 - Distribution Artifact Verification

Audits a published MerkleDistributorInfo without trusting its producer:

- identifiers are in canonical form
- indices are the dense 0..N-1 positions of the sorted identifiers
- tokenTotal equals the sum of all amounts
- every proof verifies against merkleRoot
- the root rebuilt from all claims equals merkleRoot, so the tree
  holds no entitlements beyond the published ones

Results are reported as a VerificationResult rather than raised.
"""
from __future__ import annotations

import logging
from typing import Literal

from distributor.balances.parse_string_balance_map import normalize_hashed_identifier
from distributor.merkle.balance_tree import BalanceTree, StringBalanceTree, _EntitlementTree
from distributor.merkle.leaves import normalize_address
from distributor.schemas.distribution import MerkleDistributorInfo
from distributor.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)

IdentifierKind = Literal["address", "string"]

# Cap on identifiers listed in a failed check's details
MAX_REPORTED = 20

_TREES: dict[str, type[_EntitlementTree]] = {
    "address": BalanceTree,
    "string": StringBalanceTree,
}


def tree_class_for(kind: str) -> type[_EntitlementTree]:
    """Balance tree class for an identifier kind ("address" or "string")."""
    try:
        return _TREES[kind]
    except KeyError:
        raise ValueError(f"Unknown identifier kind: {kind!r}") from None


def _check_identifiers(info: MerkleDistributorInfo, kind: str) -> CheckResult:
    normalize = normalize_address if kind == "address" else normalize_hashed_identifier
    bad: list[str] = []
    for identifier in info.claims:
        try:
            if normalize(identifier) != identifier:
                bad.append(identifier)
        except (TypeError, ValueError):
            bad.append(identifier)

    if bad:
        return CheckResult.failed(
            "identifiers",
            f"{len(bad)} identifier(s) not in canonical {kind} form",
            {"identifiers": bad[:MAX_REPORTED]},
        )
    return CheckResult.passed("identifiers", "All identifiers canonical")


def _check_indices(info: MerkleDistributorInfo) -> CheckResult:
    misplaced = [
        identifier
        for position, identifier in enumerate(sorted(info.claims))
        if info.claims[identifier].index != position
    ]
    if misplaced:
        return CheckResult.failed(
            "indices",
            f"{len(misplaced)} claim(s) not at their sorted position",
            {"identifiers": misplaced[:MAX_REPORTED]},
        )
    return CheckResult.passed("indices", "Indices match sorted identifier order")


def _check_token_total(info: MerkleDistributorInfo) -> CheckResult:
    total = sum(claim.amount_value for claim in info.claims.values())
    if total != info.token_total_value:
        return CheckResult.failed(
            "token_total",
            "tokenTotal does not equal the sum of claim amounts",
            {"expected": str(total), "actual": str(info.token_total_value)},
        )
    return CheckResult.passed("token_total", "tokenTotal matches claim amounts")


def _check_proofs(info: MerkleDistributorInfo, tree_cls: type[_EntitlementTree]) -> CheckResult:
    invalid: list[str] = []
    for identifier, claim in info.claims.items():
        try:
            ok = tree_cls.verify_proof(
                claim.index, identifier, claim.amount_value, claim.proof, info.merkle_root
            )
        except ValueError:
            ok = False
        if not ok:
            invalid.append(identifier)

    if invalid:
        return CheckResult.failed(
            "proofs",
            f"{len(invalid)} proof(s) do not verify against merkleRoot",
            {"identifiers": invalid[:MAX_REPORTED]},
        )
    return CheckResult.passed("proofs", f"All {len(info.claims)} proofs valid")


def _check_root(info: MerkleDistributorInfo, tree_cls: type[_EntitlementTree]) -> CheckResult:
    by_index = {claim.index: identifier for identifier, claim in info.claims.items()}
    if sorted(by_index) != list(range(len(info.claims))):
        return CheckResult.failed(
            "merkle_root",
            "Claim indices are not a dense 0..N-1 range; tree cannot be rebuilt",
        )

    try:
        tree = tree_cls([
            (by_index[i], info.claims[by_index[i]].amount_value)
            for i in range(len(by_index))
        ])
    except ValueError as e:
        return CheckResult.failed("merkle_root", f"Cannot rebuild tree: {e}")

    if tree.hex_root != info.merkle_root.lower():
        return CheckResult.failed(
            "merkle_root",
            "Rebuilt root does not match merkleRoot",
            {"expected": tree.hex_root, "actual": info.merkle_root},
        )
    return CheckResult.passed("merkle_root", "Rebuilt root matches merkleRoot")


def verify_distributor_info(
    info: MerkleDistributorInfo,
    kind: IdentifierKind = "address",
) -> VerificationResult:
    """
    Verify a distribution artifact end to end.

    Args:
        info: The artifact to audit
        kind: "address" for address-keyed claims, "string" for hashed ones

    Returns:
        VerificationResult with one check per property

    Raises:
        ValueError: If kind is unknown
    """
    tree_cls = tree_class_for(kind)

    if not info.claims:
        return VerificationResult(
            ok=False,
            checks=[CheckResult.failed("claims_present", "Artifact contains no claims")],
        )

    checks = [
        _check_identifiers(info, kind),
        _check_indices(info),
        _check_token_total(info),
        _check_proofs(info, tree_cls),
        _check_root(info, tree_cls),
    ]
    result = VerificationResult(ok=all(c.ok for c in checks), checks=checks)

    logger.info(
        f"Verified {len(info.claims)} {kind} claims: "
        f"{result.passed_count} passed, {result.error_count} failed"
    )
    return result


__all__ = [
    "IdentifierKind",
    "tree_class_for",
    "verify_distributor_info",
]
