"""
CLI Hash Command

Print the keccak256 identifier hash of raw string identifiers, as used
for string-keyed balance maps.

Usage:
    distributor hash 6ccbe73b-2166-4109-816a-193c9dde9a14 [...] [--json]
"""

from __future__ import annotations

import json
from argparse import Namespace

from distributor.crypto import hash_identifier, to_hex


EXIT_SUCCESS = 0


def hash_cmd(args: Namespace) -> int:
    """Execute the hash command."""
    hashed = {raw: to_hex(hash_identifier(raw)) for raw in args.identifiers}

    if args.json:
        print(json.dumps(hashed, indent=2))
    else:
        for raw, digest in hashed.items():
            print(f"{raw}\t{digest}")

    return EXIT_SUCCESS
