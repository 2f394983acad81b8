"""
Module 02 - Sparse Merkle Tree Implementation
Fixed-depth sparse Merkle tree construction, proof generation, and verification.

This module provides:
- Default node precomputation for every level of an empty tree
- Sparse bottom-up construction from an index -> bytes leaf mapping
- Compact membership proofs (inclusion and non-inclusion)
- Proof verification against the tree's own committed root

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(data)
2. Parent hashing: parent = H(left + right)
3. Empty leaf: default_nodes[depth] = H(b"\\x00" * hash_size)
4. Empty subtree: default_nodes[d - 1] = H(default_nodes[d] + default_nodes[d])
5. Root: levels[0][0] if any leaf was supplied, else default_nodes[0]

Proof Layout:
    [head: 8 bytes big-endian u64][sibling_0 .. sibling_k: hash_size bytes each]

Bit (depth - d) of the head is set when the sibling at level d is carried in
the proof body. Siblings are ordered leaf-to-root. Cleared bits mean the
sibling is the default node for that level.

Concurrency Notes:
- The digest engine is stateful; a tree owns its engine exclusively
- Levels and default nodes are never mutated after construction
- Proof creation and verification hash through the engine, so concurrent
  callers need external locking or one tree per caller
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Sequence

from smt_core.crypto.hashing import DigestEngine
from smt_core.schemas.errors import (
    InvalidProofSizeException,
    TooLargeLeafIndexException,
    TooLargeProofSizeException,
    TooLargeTreeDepthException,
)

if TYPE_CHECKING:
    from smt_core.config.runtime import TreeConfig


logger = logging.getLogger(__name__)


DEPTH_MAX: int = 64

# Head bitmap width is fixed regardless of the tree depth
PROOF_HEAD_SIZE: int = DEPTH_MAX // 8


def hash_chunks(hasher: DigestEngine, *chunks: bytes) -> bytes:
    """Digest the concatenation of `chunks` with a freshly reset engine."""
    # reset/write/sum must not interleave with other users of the engine
    hasher.reset()
    for chunk in chunks:
        hasher.write(chunk)
    return hasher.sum()


def check_depth(depth: int) -> None:
    """
    Validate a tree depth.

    Raises:
        ValueError: If depth is negative
        TooLargeTreeDepthException: If depth exceeds DEPTH_MAX
    """
    if depth < 0:
        raise ValueError(f"Tree depth must be non-negative, got {depth}")
    if depth > DEPTH_MAX:
        raise TooLargeTreeDepthException(depth, DEPTH_MAX)


def check_index(index: int, depth: int) -> None:
    """Raise TooLargeLeafIndexException unless 0 <= index < 2^depth."""
    if not 0 <= index < (1 << depth):
        raise TooLargeLeafIndexException(index, depth)


def compute_default_nodes(hasher: DigestEngine, depth: int) -> list[bytes]:
    """
    Compute the digest of an empty subtree for every level 0..depth.

    The deepest entry is the hash of an all-zero block of hash_size bytes,
    which is distinct from hashing an application-level empty value.

    Args:
        hasher: Digest engine
        depth: Tree depth

    Returns:
        List of depth + 1 digests, index 0 being the empty-tree root
    """
    check_depth(depth)

    default_nodes: list[bytes] = [b""] * (depth + 1)
    default_nodes[depth] = hash_chunks(hasher, bytes(hasher.digest_size))

    for d in range(depth, 0, -1):
        default_nodes[d - 1] = hash_chunks(hasher, default_nodes[d], default_nodes[d])

    return default_nodes


@dataclass(frozen=True)
class MembershipProof:
    """
    Decoded form of a binary membership proof.

    Attributes:
        head: 64-bit bitmap, bit i set when the sibling i levels above the
              leaf is carried in `siblings`
        siblings: Non-default sibling digests in leaf-to-root order
    """
    head: int
    siblings: tuple[bytes, ...] = ()

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if not 0 <= self.head < (1 << DEPTH_MAX):
            raise ValueError(f"Proof head must fit in {DEPTH_MAX} bits, got {self.head}")
        if bin(self.head).count("1") != len(self.siblings):
            raise ValueError(
                f"Proof head marks {bin(self.head).count('1')} siblings, "
                f"got {len(self.siblings)}"
            )

    @property
    def sibling_count(self) -> int:
        return len(self.siblings)

    def has_sibling(self, level_offset: int) -> bool:
        """True if the sibling `level_offset` levels above the leaf is explicit."""
        return bool((self.head >> level_offset) & 1)

    def encode(self) -> bytes:
        """Serialize as head (8 bytes big-endian) followed by the siblings."""
        return self.head.to_bytes(PROOF_HEAD_SIZE, "big") + b"".join(self.siblings)

    @staticmethod
    def max_size(hash_size: int, depth: int) -> int:
        """Largest proof a tree of this depth can produce."""
        return PROOF_HEAD_SIZE + hash_size * depth

    @classmethod
    def decode(cls, data: bytes, hash_size: int, depth: int) -> "MembershipProof":
        """
        Parse a binary proof for a tree of the given digest size and depth.

        Size checks run in a fixed order: overall length first, then body
        alignment, then agreement between the head bitmap and the body.

        Args:
            data: Encoded proof
            hash_size: Digest size of the tree's engine
            depth: Tree depth

        Returns:
            Decoded MembershipProof

        Raises:
            TooLargeProofSizeException: If data is longer than max_size()
            InvalidProofSizeException: If the body is not a whole number of
                digests, or the head disagrees with the body
        """
        data = bytes(data)
        size = len(data)

        max_size = cls.max_size(hash_size, depth)
        if size > max_size:
            raise TooLargeProofSizeException(size, max_size)

        if size < PROOF_HEAD_SIZE:
            raise InvalidProofSizeException(
                f"proof shorter than the {PROOF_HEAD_SIZE}-byte head", size
            )
        if (size - PROOF_HEAD_SIZE) % hash_size != 0:
            raise InvalidProofSizeException(
                f"body is not a multiple of {hash_size} bytes",
                size,
                details={"hash_size": hash_size},
            )

        head = int.from_bytes(data[:PROOF_HEAD_SIZE], "big")
        if head >> depth:
            raise InvalidProofSizeException(
                f"head bitmap marks levels beyond depth {depth}",
                size,
                details={"head": head, "depth": depth},
            )

        sibling_count = (size - PROOF_HEAD_SIZE) // hash_size
        if bin(head).count("1") != sibling_count:
            raise InvalidProofSizeException(
                f"head bitmap marks {bin(head).count('1')} siblings, body holds {sibling_count}",
                size,
                details={"head": head},
            )

        siblings = tuple(
            data[offset:offset + hash_size]
            for offset in range(PROOF_HEAD_SIZE, size, hash_size)
        )
        return cls(head=head, siblings=siblings)


def compute_path_root(
    hasher: DigestEngine,
    default_nodes: Sequence[bytes],
    index: int,
    leaf_digest: bytes,
    proof: MembershipProof,
) -> bytes:
    """
    Replay an authentication path from a leaf digest up to a candidate root.

    Algorithm:
    1. Start with the leaf digest at level depth
    2. For each level d = depth .. 1:
       - Sibling is the next proof digest if the head bit is set,
         otherwise default_nodes[d]
       - Even index: node = H(node + sibling); odd: node = H(sibling + node)
       - Shift the head right, move index up
    3. Return the node reached at level 0
    """
    depth = len(default_nodes) - 1
    head = proof.head
    siblings = iter(proof.siblings)
    node = leaf_digest

    for d in range(depth, 0, -1):
        if head & 1:
            sibling = next(siblings)
        else:
            sibling = default_nodes[d]

        if index % 2 == 0:
            node = hash_chunks(hasher, node, sibling)
        else:
            node = hash_chunks(hasher, sibling, node)

        head >>= 1
        index //= 2

    return node


class SparseMerkleTree:
    """
    Immutable, batch-built sparse Merkle tree over indices [0, 2^depth).

    Only ancestors of supplied leaves are stored; every other node is the
    default node of its level.

    Example:
        >>> from smt_core.crypto import new_digest
        >>> tree = SparseMerkleTree(new_digest("sha256"), 2)
        >>> tree.root.hex()
        '1223349a40d2ee10bd1bebb5889ef8018c8bc13359ed94b387810af96c6e4268'
    """

    def __init__(
        self,
        hasher: DigestEngine,
        depth: int,
        leaves: Mapping[int, bytes] | None = None,
    ) -> None:
        """
        Build a tree.

        Args:
            hasher: Digest engine owned exclusively by this tree
            depth: Number of levels between root and leaves (0..DEPTH_MAX)
            leaves: Sparse mapping of leaf index to raw leaf bytes

        Raises:
            TooLargeTreeDepthException: If depth > DEPTH_MAX
            TooLargeLeafIndexException: If any leaf index is outside [0, 2^depth)
        """
        check_depth(depth)

        leaves = leaves or {}
        for index in leaves:
            check_index(index, depth)

        self._hasher = hasher
        self._hash_size = hasher.digest_size
        self._depth = depth
        self._default_nodes = tuple(compute_default_nodes(hasher, depth))
        self._levels: list[dict[int, bytes]] = [{} for _ in range(depth + 1)]

        self._build(leaves)

        logger.debug(
            f"Built sparse Merkle tree: depth={depth} leaves={len(leaves)} "
            f"explicit_nodes={sum(len(level) for level in self._levels)}"
        )

    @classmethod
    def from_config(
        cls,
        config: "TreeConfig",
        leaves: Mapping[int, bytes] | None = None,
    ) -> "SparseMerkleTree":
        """Build a tree with a fresh digest engine described by `config`."""
        return cls(config.new_hasher(), config.depth, leaves)

    def _build(self, leaves: Mapping[int, bytes]) -> None:
        leaf_level = self._levels[self._depth]
        for index, data in leaves.items():
            leaf_level[index] = hash_chunks(self._hasher, data if data is not None else b"")

        for d in range(self._depth, 0, -1):
            level = self._levels[d]
            parent_level = self._levels[d - 1]

            for index, node in level.items():
                if index % 2 == 0:
                    sibling = self.node(d, index + 1)
                    parent_level[index // 2] = hash_chunks(self._hasher, node, sibling)
                elif index - 1 not in level:
                    parent_level[index // 2] = hash_chunks(
                        self._hasher, self._default_nodes[d], node
                    )
                # Odd index with an explicit even sibling: parent already computed

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def hash_size(self) -> int:
        return self._hash_size

    @property
    def index_limit(self) -> int:
        """Number of addressable leaves, 2^depth."""
        return 1 << self._depth

    @property
    def max_index(self) -> int:
        return (1 << self._depth) - 1

    @property
    def default_nodes(self) -> tuple[bytes, ...]:
        return self._default_nodes

    @property
    def leaf_count(self) -> int:
        """Number of explicitly supplied leaves."""
        return len(self._levels[self._depth])

    @property
    def root(self) -> bytes:
        """Root digest: levels[0][0] if present, else the empty-tree root."""
        return self.node(0, 0)

    def default_node(self, level: int) -> bytes:
        self._check_level(level)
        return self._default_nodes[level]

    def node(self, level: int, index: int) -> bytes:
        """
        Look up a node, falling back to the level's default node.

        This is the single place where implicit nodes are resolved.
        """
        self._check_level(level)
        return self._levels[level].get(index, self._default_nodes[level])

    def explicit_nodes(self, level: int) -> Mapping[int, bytes]:
        """Read-only view of the explicitly stored nodes at a level."""
        self._check_level(level)
        return MappingProxyType(self._levels[level])

    def _check_level(self, level: int) -> None:
        if not 0 <= level <= self._depth:
            raise IndexError(f"Level {level} out of range for depth {self._depth}")

    # -------------------------------------------------------------------------
    # Proofs
    # -------------------------------------------------------------------------

    def create_membership_proof(self, index: int) -> bytes:
        """
        Create a proof for the leaf at `index`.

        Works for supplied indices (inclusion) and for indices never supplied
        (non-inclusion). Only non-default siblings are carried, so the proof
        is 8 + hash_size * popcount(head) bytes long.

        Raises:
            TooLargeLeafIndexException: If index is outside [0, 2^depth)
        """
        check_index(index, self._depth)

        head = 0
        siblings: list[bytes] = []
        current = index

        for d in range(self._depth, 0, -1):
            sibling = self._levels[d].get(current ^ 1)
            if sibling is not None:
                siblings.append(sibling)
                head |= 1 << (self._depth - d)
            current //= 2

        proof = MembershipProof(head=head, siblings=tuple(siblings))
        logger.debug(
            f"Created membership proof: index={index} head={head:#x} "
            f"siblings={proof.sibling_count}"
        )
        return proof.encode()

    def verify_membership_proof(self, index: int, proof: bytes) -> bool:
        """
        Verify a proof against this tree's committed root.

        The path is replayed from the tree's own digest for `index` (or the
        empty-leaf digest if the index was never supplied), not from a value
        carried by the caller. Use SparseMerkleVerifier.verify_leaf_in_root
        to check an externally claimed leaf value.

        Returns:
            True if the replayed root equals the tree root, False otherwise

        Raises:
            TooLargeLeafIndexException: If index is outside [0, 2^depth)
            TooLargeProofSizeException: If the proof is longer than any proof
                this tree could produce
            InvalidProofSizeException: If the proof body is malformed
        """
        check_index(index, self._depth)
        decoded = MembershipProof.decode(proof, self._hash_size, self._depth)

        candidate = compute_path_root(
            self._hasher,
            self._default_nodes,
            index,
            self.node(self._depth, index),
            decoded,
        )
        ok = candidate == self.root
        logger.debug(f"Verified membership proof: index={index} ok={ok}")
        return ok

    def __repr__(self) -> str:
        return (
            f"SparseMerkleTree(depth={self._depth}, hash_size={self._hash_size}, "
            f"leaves={self.leaf_count}, root={self.root.hex()})"
        )


__all__ = [
    "DEPTH_MAX",
    "PROOF_HEAD_SIZE",
    "MembershipProof",
    "SparseMerkleTree",
    "check_depth",
    "check_index",
    "compute_default_nodes",
    "compute_path_root",
    "hash_chunks",
]
