"""
CLI Generate Command

Build a distribution artifact from a balance-map JSON file.

Input may be the old format ({identifier: amount}) or the new format
([{"address"|"hashed": ..., "earnings": ..., "reasons": ...}]).

Usage:
    distributor generate balances.json [--kind address|string] [--hash-keys] [--out PATH]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from distributor.balances import parse_balance_map, parse_string_balance_map
from distributor.config import RuntimeConfig
from distributor.schemas import BalanceMapException, MerkleDistributorInfo


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_balance_map(path: Path) -> Any:
    """Read a balance map from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def build_artifact(
    balances: Any,
    kind: str,
    hash_keys: bool = False,
) -> MerkleDistributorInfo:
    """Dispatch to the parser for the identifier kind."""
    if kind == "string":
        return parse_string_balance_map(balances, hash_keys=hash_keys)
    if hash_keys:
        raise ValueError("--hash-keys only applies to string identifiers")
    return parse_balance_map(balances)


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config: RuntimeConfig = args.runtime_config
    input_path = Path(args.input)
    kind = args.kind or config.generator.identifier_kind
    hash_keys = args.hash_keys or config.generator.hash_keys

    if not input_path.exists():
        print(f"Error: Input not found: {input_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        balances = load_balance_map(input_path)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading balance map: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        info = build_artifact(balances, kind, hash_keys=hash_keys)
    except BalanceMapException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (TypeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    text = info.to_json(indent=config.generator.json_indent)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(info.claims)} claims to {out_path}")
        print(f"merkle_root: {info.merkle_root}")
        print(f"token_total: {info.token_total_value}")
        print(f"claims: {len(info.claims)}")
        print(f"saved: {out_path}")
    else:
        print(text)

    return EXIT_SUCCESS
