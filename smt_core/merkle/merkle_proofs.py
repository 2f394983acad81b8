"""
Module 02 - Sparse Merkle Proofs Convenience Wrappers
Thin wrappers around the sparse tree for a cleaner prover/verifier API.

This module provides class-based interfaces:
- SparseMerkleProver: Build roots and generate proofs
- SparseMerkleVerifier: Verify proofs, including against a claimed leaf value

SparseMerkleTree.verify_membership_proof replays the path from the tree's own
leaf digest. verify_leaf_in_root is the stateless check a remote party runs:
it hashes a claimed leaf value and needs only the depth, the digest engine,
the proof and the committed root.
"""
from __future__ import annotations

import logging
from typing import Mapping

from smt_core.crypto.hashing import DigestEngine
from smt_core.merkle.sparse_tree import (
    MembershipProof,
    SparseMerkleTree,
    check_index,
    compute_default_nodes,
    compute_path_root,
    hash_chunks,
)


logger = logging.getLogger(__name__)


class SparseMerkleProver:
    """
    Convenience class for generating sparse Merkle proofs.

    Example:
        >>> tree = SparseMerkleTree(new_digest(), 3, {0: b"a", 5: b"b"})
        >>> proof = SparseMerkleProver.prove(tree, 5)
        >>> SparseMerkleVerifier.verify(tree, 5, proof)
        True
    """

    @staticmethod
    def prove(tree: SparseMerkleTree, index: int) -> bytes:
        """
        Generate a membership proof for the leaf at the given index.

        Raises:
            TooLargeLeafIndexException: If index is outside [0, 2^depth)
        """
        return tree.create_membership_proof(index)

    @staticmethod
    def compute_root(
        hasher: DigestEngine,
        depth: int,
        leaves: Mapping[int, bytes] | None = None,
    ) -> bytes:
        """
        Compute the root for a sparse leaf mapping.

        Args:
            hasher: Digest engine
            depth: Tree depth
            leaves: Sparse mapping of leaf index to raw leaf bytes

        Returns:
            Root digest
        """
        return SparseMerkleTree(hasher, depth, leaves).root


class SparseMerkleVerifier:
    """Convenience class for verifying sparse Merkle proofs."""

    @staticmethod
    def verify(tree: SparseMerkleTree, index: int, proof: bytes) -> bool:
        """Verify a proof against the tree's own leaf digest and root."""
        return tree.verify_membership_proof(index, proof)

    @staticmethod
    def verify_leaf_in_root(
        hasher: DigestEngine,
        depth: int,
        index: int,
        leaf: bytes | None,
        proof: bytes,
        root: bytes,
    ) -> bool:
        """
        Verify that `leaf` sits at `index` under `root`.

        Pass leaf=None to check a non-inclusion proof: the path then starts
        from the empty-leaf digest.

        Args:
            hasher: Digest engine matching the one that built the tree
            depth: Tree depth
            index: Claimed leaf index
            leaf: Claimed raw leaf value, or None for an empty leaf
            proof: Encoded membership proof
            root: Committed root

        Returns:
            True if the replayed root equals `root`, False otherwise

        Raises:
            TooLargeTreeDepthException: If depth > DEPTH_MAX
            TooLargeLeafIndexException: If index is outside [0, 2^depth)
            TooLargeProofSizeException: If the proof is too long for depth
            InvalidProofSizeException: If the proof body is malformed
        """
        default_nodes = compute_default_nodes(hasher, depth)
        check_index(index, depth)
        decoded = MembershipProof.decode(proof, hasher.digest_size, depth)

        if leaf is None:
            leaf_digest = default_nodes[depth]
        else:
            leaf_digest = hash_chunks(hasher, leaf)

        candidate = compute_path_root(hasher, default_nodes, index, leaf_digest, decoded)
        ok = candidate == root
        logger.debug(f"Verified leaf against root: index={index} ok={ok}")
        return ok


__all__ = [
    "SparseMerkleProver",
    "SparseMerkleVerifier",
]
