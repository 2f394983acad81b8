"""
Module 02 - Sparse Merkle Tree
Fixed-depth sparse Merkle tree construction + proof generation/verification.

This module provides:
- SparseMerkleTree: Immutable tree built from a sparse index -> bytes mapping
- MembershipProof: Decoded form of the binary proof format
- compute_default_nodes: Empty-subtree digests for every level
- SparseMerkleProver / SparseMerkleVerifier: Convenience wrappers

Usage:
    from smt_core.crypto import new_digest
    from smt_core.merkle import SparseMerkleTree, SparseMerkleVerifier

    tree = SparseMerkleTree(new_digest("sha256"), 16, {0: b"a", 42: b"b"})
    root = tree.root

    proof = tree.create_membership_proof(42)
    assert tree.verify_membership_proof(42, proof)

    # A remote party holding only the root
    assert SparseMerkleVerifier.verify_leaf_in_root(
        new_digest("sha256"), 16, 42, b"b", proof, root
    )
"""
from .sparse_tree import (
    DEPTH_MAX,
    PROOF_HEAD_SIZE,
    MembershipProof,
    SparseMerkleTree,
    check_depth,
    check_index,
    compute_default_nodes,
    compute_path_root,
    hash_chunks,
)

from .merkle_proofs import (
    SparseMerkleProver,
    SparseMerkleVerifier,
)


__all__ = [
    # Constants
    "DEPTH_MAX",
    "PROOF_HEAD_SIZE",
    # Core types
    "MembershipProof",
    "SparseMerkleTree",
    # Core functions
    "check_depth",
    "check_index",
    "compute_default_nodes",
    "compute_path_root",
    "hash_chunks",
    # Convenience classes
    "SparseMerkleProver",
    "SparseMerkleVerifier",
]
