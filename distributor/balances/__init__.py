"""
Module 04 - Entitlement Map Parsing

Turns a balance map into the published distribution artifact and audits
published artifacts.

Usage:
    from distributor.balances import parse_balance_map, verify_distributor_info

    info = parse_balance_map({"0x...": 100, "0x...": "0x65"})
    result = verify_distributor_info(info, kind="address")
"""

from .normalize import Entitlement, normalize_balances
from .parse_balance_map import build_distributor_info, parse_balance_map
from .parse_string_balance_map import normalize_hashed_identifier, parse_string_balance_map
from .verify import IdentifierKind, tree_class_for, verify_distributor_info

__all__ = [
    "Entitlement",
    "normalize_balances",
    "build_distributor_info",
    "parse_balance_map",
    "normalize_hashed_identifier",
    "parse_string_balance_map",
    "IdentifierKind",
    "tree_class_for",
    "verify_distributor_info",
]
