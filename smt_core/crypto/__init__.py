"""
Core cryptographic utilities.

Module 01 provides the digest engine used by the sparse Merkle tree.
"""
from .hashing import (
    DigestEngine,
    HashlibDigest,
    new_digest,
    sha256,
    to_hex,
    from_hex,
)

__all__ = [
    "DigestEngine",
    "HashlibDigest",
    "new_digest",
    "sha256",
    "to_hex",
    "from_hex",
]
