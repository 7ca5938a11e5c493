"""
Test fixtures package for distributor tests.

This package provides factory functions for creating test objects:
- common.py: chain, tokens, leaves, trees and known identifier vectors

Usage:
    from fixtures.common import make_chain, make_token

    def test_something():
        chain = make_chain()
        token = make_token(chain)
"""

from .common import (
    KNOWN_IDENTIFIER_HASHES,
    KNOWN_STRING_BALANCES,
    ZERO_BYTES32,
    fund_and_approve,
    make_chain,
    make_falsy_token,
    make_leaves,
    make_string_identifiers,
    make_token,
    make_two_leaf_string_tree,
    make_two_leaf_tree,
    make_uuid,
)

__all__ = [
    "KNOWN_IDENTIFIER_HASHES",
    "KNOWN_STRING_BALANCES",
    "ZERO_BYTES32",
    "fund_and_approve",
    "make_chain",
    "make_falsy_token",
    "make_leaves",
    "make_string_identifiers",
    "make_token",
    "make_two_leaf_string_tree",
    "make_two_leaf_tree",
    "make_uuid",
]
