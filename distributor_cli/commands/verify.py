"""
CLI Verify Command

Audit a published distribution artifact offline:
- identifiers canonical, indices dense and sorted
- tokenTotal equals the sum of amounts
- every proof verifies, and the rebuilt root matches

Usage:
    distributor verify artifact.json [--kind address|string] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from distributor.balances import verify_distributor_info
from distributor.schemas import MerkleDistributorInfo, SchemaValidationException, VerificationResult


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of artifact verification for CLI output."""
    artifact_path: str = ""
    merkle_root: str = ""
    token_total: str = ""
    claim_count: int = 0
    ok: bool = False
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def build_summary(
    artifact_path: str,
    info: MerkleDistributorInfo,
    result: VerificationResult,
) -> VerifySummary:
    """Build a VerifySummary from a verification result."""
    return VerifySummary(
        artifact_path=artifact_path,
        merkle_root=info.merkle_root,
        token_total=str(info.token_total_value),
        claim_count=len(info.claims),
        ok=result.ok,
        checks=[
            {"check_id": c.check_id, "ok": c.ok, "message": c.message}
            for c in result.checks
        ],
        errors=result.get_error_messages(),
    )


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"artifact: {summary.artifact_path}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"token_total: {summary.token_total}")
    print(f"claims: {summary.claim_count}")
    print(f"ok: {str(summary.ok).lower()}")

    for check in summary.checks:
        status = "✓" if check["ok"] else "✗"
        print(f"  {status} {check['check_id']}: {check['message']}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    artifact_path = Path(args.artifact)
    kind = args.kind or args.runtime_config.generator.identifier_kind

    if not artifact_path.exists():
        print(f"Error: Artifact not found: {artifact_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        info = MerkleDistributorInfo.from_json(artifact_path.read_text(encoding="utf-8"))
    except SchemaValidationException as e:
        print(f"Error loading artifact: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    result = verify_distributor_info(info, kind=kind)
    summary = build_summary(str(artifact_path), info, result)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
