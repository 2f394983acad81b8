"""
Test fixtures package for sparse Merkle tree tests.

This package provides factory functions for creating test objects:
- common.py: Digest engines, leaf sets, trees and leaf files

Usage:
    from fixtures import make_tree, make_sample_leaves

    def test_something():
        tree = make_tree(depth=3, leaves=make_sample_leaves())
"""

from .common import (
    SAMPLE_LEAVES,
    FailingDigest,
    make_hasher,
    make_sample_leaves,
    make_tree,
    write_leaf_file,
)

__all__ = [
    "SAMPLE_LEAVES",
    "FailingDigest",
    "make_hasher",
    "make_sample_leaves",
    "make_tree",
    "write_leaf_file",
]
