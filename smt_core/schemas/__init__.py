"""
Schemas and error taxonomy for the sparse Merkle tree.

The leaf-set input schema lives in smt_core.schemas.leaves and is imported
from there directly.
"""

from .errors import (
    ErrorCodes,
    SparseMerkleError,
    SparseMerkleException,
    TooLargeTreeDepthException,
    TooLargeLeafIndexException,
    TooLargeProofSizeException,
    InvalidProofSizeException,
    UnsupportedHashAlgorithmException,
    SchemaValidationException,
    ConfigException,
)

__all__ = [
    "ErrorCodes",
    "SparseMerkleError",
    "SparseMerkleException",
    "TooLargeTreeDepthException",
    "TooLargeLeafIndexException",
    "TooLargeProofSizeException",
    "InvalidProofSizeException",
    "UnsupportedHashAlgorithmException",
    "SchemaValidationException",
    "ConfigException",
]
