"""
Module 01 - Hashing Utilities
Digest engine adapter and hex helpers for the sparse Merkle tree.

This module provides:
- DigestEngine: the reset/write/sum contract the tree hashes through
- HashlibDigest: a DigestEngine backed by any fixed-length hashlib algorithm
- One-shot SHA-256 hashing for raw bytes
- Hex encoding/decoding with 0x prefix

Concurrency Notes:
- A DigestEngine carries mutable state between reset() and sum()
- One engine must never be shared by callers running concurrently
- Use new_digest() to obtain an independent engine per tree
"""
from __future__ import annotations

import hashlib
from typing import Protocol, runtime_checkable

from smt_core.schemas.errors import UnsupportedHashAlgorithmException


DEFAULT_HASH_ALGORITHM = "sha256"


@runtime_checkable
class DigestEngine(Protocol):
    """
    Resettable, incrementally fed hash function.

    Every call to sum() on a given engine returns digest_size bytes.
    """

    @property
    def digest_size(self) -> int: ...

    def reset(self) -> None: ...

    def write(self, data: bytes) -> None: ...

    def sum(self) -> bytes: ...


class HashlibDigest:
    """
    DigestEngine backed by a hashlib algorithm.

    Only fixed-length algorithms are accepted. Extendable-output functions
    (shake_128, shake_256) have no intrinsic digest size and are rejected.

    Example:
        >>> engine = HashlibDigest("sha256")
        >>> engine.write(b"hello")
        >>> engine.sum().hex()[:8]
        '2cf24dba'
    """

    def __init__(self, name: str = DEFAULT_HASH_ALGORITHM) -> None:
        try:
            state = hashlib.new(name)
        except (ValueError, TypeError) as e:
            raise UnsupportedHashAlgorithmException(name, reason=str(e)) from e

        if state.digest_size <= 0:
            raise UnsupportedHashAlgorithmException(
                name, reason="variable-length digests are not supported"
            )

        self._name = state.name
        self._state = state

    @property
    def name(self) -> str:
        return self._name

    @property
    def digest_size(self) -> int:
        return self._state.digest_size

    def reset(self) -> None:
        self._state = hashlib.new(self._name)

    def write(self, data: bytes) -> None:
        self._state.update(data)

    def sum(self) -> bytes:
        return self._state.digest()

    def __repr__(self) -> str:
        return f"HashlibDigest({self._name!r})"


def new_digest(name: str = DEFAULT_HASH_ALGORITHM) -> HashlibDigest:
    """
    Create a fresh, unshared digest engine.

    Args:
        name: hashlib algorithm name (e.g. "sha256", "sha3_256", "blake2b")

    Returns:
        A new HashlibDigest instance

    Raises:
        UnsupportedHashAlgorithmException: If the algorithm is unknown or
            has no fixed digest size
    """
    return HashlibDigest(name)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DEFAULT_HASH_ALGORITHM",
    "DigestEngine",
    "HashlibDigest",
    "new_digest",
    "sha256",
    "to_hex",
    "from_hex",
]
