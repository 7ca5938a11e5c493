"""
Module 03 - Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- Deterministic Merkle root computation
- Merkle proof generation for any leaf index
- Merkle proof verification driven by the leaf index
- Promotion rule for odd trailing nodes

Canonical Commitment Rules (Hard Contracts):
1. Parent hashing: parent = keccak256(left + right)
2. Combination order while verifying comes from the leaf index:
   bit 0 at the leaf level, then successive right-shifts.
   An even position is hashed first, an odd position second.
3. Odd levels: the trailing node is promoted unchanged to the next level.
   It is never duplicated and never paired with a zero leaf.
4. Empty leaves: rejected
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is defined upstream (sorted identifiers)
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from distributor.crypto.hashing import DIGEST_SIZE, hash_concat, to_hex


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling hashes from bottom to top of tree; levels where
                  the node was promoted contribute no sibling
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = b""

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    def hex_siblings(self) -> list[str]:
        """Siblings as 0x-prefixed hex strings."""
        return [to_hex(s) for s in self.siblings]


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Parent hash is deterministic: keccak256(left + right)
    """
    return hash_concat(left, right)


def combine(index_bit: int, current: bytes, sibling: bytes) -> bytes:
    """
    Combine the node being verified with its sibling.

    When ``index_bit`` is 0 the current node is the left child and is
    concatenated first; otherwise the sibling goes first. Swapping the
    operands yields a different root.

    Args:
        index_bit: Low bit of the current position (0 = left, 1 = right)
        current: Digest computed so far on the path to the root
        sibling: Sibling digest taken from the proof

    Returns:
        Parent digest (32 bytes)
    """
    if index_bit & 1:
        return merkle_parent(sibling, current)
    return merkle_parent(current, sibling)


def _check_leaves(leaves: Sequence[bytes]) -> None:
    if len(leaves) == 0:
        raise ValueError("Cannot build a Merkle tree from an empty leaf list")
    for i, leaf in enumerate(leaves):
        if not isinstance(leaf, (bytes, bytearray)) or len(leaf) != DIGEST_SIZE:
            raise ValueError(
                f"Leaf {i} must be a {DIGEST_SIZE}-byte digest"
            )


def build_layers(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every layer of the tree, leaves first and root last.

    Algorithm:
    - Pair adjacent nodes left to right and hash each pair
    - If a layer has an odd count, carry the trailing node up unchanged
    - Repeat until a single node remains

    Example: [a, b, c] -> [parent(a,b), c] -> [parent(parent(a,b), c)]
    """
    _check_leaves(leaves)

    layers: list[list[bytes]] = [[bytes(leaf) for leaf in leaves]]
    current_level = layers[0]

    while len(current_level) > 1:
        next_level: list[bytes] = []
        for i in range(0, len(current_level) - 1, 2):
            next_level.append(merkle_parent(current_level[i], current_level[i + 1]))

        # Promote the odd trailing node as-is
        if len(current_level) % 2 == 1:
            next_level.append(current_level[-1])

        layers.append(next_level)
        current_level = next_level

    return layers


def proof_from_layers(layers: Sequence[Sequence[bytes]], index: int) -> list[bytes]:
    """
    Collect the sibling path for ``index`` from prebuilt layers.

    A level where the node at ``index`` is the promoted trailing node
    contributes no sibling.
    """
    leaf_count = len(layers[0])
    if index < 0 or index >= leaf_count:
        raise IndexError(
            f"Leaf index {index} out of range for {leaf_count} leaves"
        )

    siblings: list[bytes] = []
    position = index
    for level in layers[:-1]:
        sibling_index = position ^ 1
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        position >>= 1

    return siblings


class MerkleTree:
    """
    A Merkle tree over an ordered list of 32-byte leaves.

    The layers are computed once so proofs for every leaf of a large
    tree can be produced in logarithmic time each.

    Example:
        >>> tree = MerkleTree([keccak256(b"a"), keccak256(b"b"), keccak256(b"c")])
        >>> len(tree.proof(2))
        1
    """

    def __init__(self, leaves: Sequence[bytes]) -> None:
        self._layers = build_layers(leaves)

    @property
    def leaves(self) -> list[bytes]:
        return list(self._layers[0])

    @property
    def leaf_count(self) -> int:
        return len(self._layers[0])

    @property
    def depth(self) -> int:
        """Number of hashing levels between the leaves and the root."""
        return len(self._layers) - 1

    @property
    def root(self) -> bytes:
        return self._layers[-1][0]

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    def leaf(self, index: int) -> bytes:
        return self._layers[0][index]

    def proof(self, index: int) -> list[bytes]:
        """Sibling digests for the leaf at ``index``, bottom-up."""
        return proof_from_layers(self._layers, index)

    def hex_proof(self, index: int) -> list[str]:
        return [to_hex(s) for s in self.proof(index)]

    def merkle_proof(self, index: int) -> MerkleProof:
        return MerkleProof(
            leaf=self.leaf(index),
            index=index,
            siblings=self.proof(index),
            root=self.root,
        )


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Args:
        leaves: Sequence of 32-byte leaf hashes. Order matters and is preserved.

    Returns:
        32-byte Merkle root

    Raises:
        ValueError: If leaves is empty or a leaf is not 32 bytes
    """
    return build_layers(leaves)[-1][0]


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    return MerkleTree(leaves).merkle_proof(index)


def process_proof(leaf: bytes, index: int, siblings: Sequence[bytes]) -> bytes:
    """
    Fold a proof into the root it implies.

    The position starts at ``index`` and shifts right once per level.
    At each level the low bit of the position selects the operand order.

    Levels where the node was promoted carry no sibling. A promoted node is
    always the even-positioned last node of its level, and every level above
    it on the path only pairs where the position bit is 1. So when the
    position is even and the remaining siblings exactly match the set bits
    left in the position, this level was a promotion and is skipped.

    Args:
        leaf: Leaf digest
        index: Leaf index in the tree
        siblings: Proof siblings, bottom-up

    Returns:
        The computed root candidate
    """
    if index < 0:
        raise ValueError(f"Leaf index must be non-negative, got {index}")

    current_hash = leaf
    position = index
    remaining = len(siblings)

    for sibling in siblings:
        # Skip promoted levels
        while position & 1 == 0 and remaining == bin(position).count("1"):
            position >>= 1

        current_hash = combine(position & 1, current_hash, sibling)
        remaining -= 1
        position >>= 1

    return current_hash


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof.

    Recomputes the root from the leaf and siblings and compares it
    byte-for-byte with the claimed root. An empty sibling list only
    verifies for a single-leaf tree, where the root is the leaf.
    """
    return process_proof(proof.leaf, proof.index, proof.siblings) == proof.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the maximum proof length for a tree with the given leaf count.

    This is ceil(log2(num_leaves)): the number of hashing levels.
    A single leaf has depth 0, two leaves depth 1, three leaves depth 2.
    """
    if num_leaves < 0:
        raise ValueError(f"Leaf count must be non-negative, got {num_leaves}")
    if num_leaves <= 1:
        return 0
    return (num_leaves - 1).bit_length()


__all__ = [
    "MerkleProof",
    "MerkleTree",
    "merkle_parent",
    "combine",
    "build_layers",
    "proof_from_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "process_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
