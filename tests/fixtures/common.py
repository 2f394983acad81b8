"""
Common test fixtures shared by all modules.

Provides factory functions for:
- Digest engines (real hashlib-backed, and one that fails on demand)
- Sample sparse leaf assignments
- Trees
- Leaf files for CLI tests
"""

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from smt_core.crypto.hashing import HashlibDigest, new_digest, to_hex
from smt_core.merkle import SparseMerkleTree


# Leaves used by the reference vectors: 8 x 0x00 at index 0, 8 x 0x03 at index 3
SAMPLE_LEAVES: dict[int, bytes] = {
    0: bytes([0x00] * 8),
    3: bytes([0x03] * 8),
}


def make_hasher(name: str = "sha256") -> HashlibDigest:
    """Create a fresh digest engine."""
    return new_digest(name)


def make_sample_leaves() -> dict[int, bytes]:
    """Return a copy of SAMPLE_LEAVES."""
    return dict(SAMPLE_LEAVES)


def make_tree(
    depth: int = 3,
    leaves: Optional[Mapping[int, bytes]] = None,
    algorithm: str = "sha256",
) -> SparseMerkleTree:
    """Build a tree with a fresh engine."""
    return SparseMerkleTree(make_hasher(algorithm), depth, leaves)


def write_leaf_file(
    path: Path,
    leaves: Mapping[int, bytes],
    **extra: Any,
) -> Path:
    """Write a JSON leaf file in the CLI's input format."""
    data: dict[str, Any] = dict(extra)
    data["leaves"] = {str(index): to_hex(value) for index, value in leaves.items()}
    path.write_text(json.dumps(data))
    return path


class FailingDigest:
    """
    Digest engine that raises OSError on the Nth write.

    Stands in for an engine backed by I/O, to check that failures propagate.
    `fail_on_write` may be lowered after construction to fail a later phase.
    """

    def __init__(self, fail_on_write: int = 1, name: str = "sha256") -> None:
        self._inner = new_digest(name)
        self.fail_on_write = fail_on_write
        self.writes = 0

    @property
    def digest_size(self) -> int:
        return self._inner.digest_size

    def reset(self) -> None:
        self._inner.reset()

    def write(self, data: bytes) -> None:
        self.writes += 1
        if self.writes >= self.fail_on_write:
            raise OSError("digest backend unavailable")
        self._inner.write(data)

    def sum(self) -> bytes:
        return self._inner.sum()
