"""
Module 03 - Merkle Tree and Entitlement Commitments
Deterministic Merkle tree construction + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- MerkleProof / MerkleTree: tree construction and sibling paths
- combine: order-sensitive pair hashing driven by the leaf index
- address_leaf / string_leaf: entitlement leaf encoders
- BalanceTree / StringBalanceTree: trees over entitlements

Canonical Commitment Rules:
1. Leaf hashing: keccak256(abi.encodePacked(index, identifier, amount))
2. Parent hashing: keccak256(left + right)
3. Odd levels: promote the trailing node unchanged
4. Single leaf: root = leaf

Usage:
    from distributor.merkle import BalanceTree

    tree = BalanceTree([(alice, 100), (bob, 101)])
    proof = tree.get_proof(1, bob, 101)
    assert BalanceTree.verify_proof(1, bob, 101, proof, tree.root)
"""
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    build_layers,
    build_merkle_proof,
    build_merkle_root,
    combine,
    compute_tree_depth,
    merkle_parent,
    process_proof,
    proof_from_layers,
    verify_merkle_proof,
)
from .leaves import (
    address_leaf,
    normalize_address,
    normalize_identifier_hash,
    string_leaf,
)
from .balance_tree import BalanceTree, StringBalanceTree


__all__ = [
    # Core types
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "merkle_parent",
    "combine",
    "build_layers",
    "proof_from_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "process_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Leaves
    "address_leaf",
    "string_leaf",
    "normalize_address",
    "normalize_identifier_hash",
    # Entitlement trees
    "BalanceTree",
    "StringBalanceTree",
]
