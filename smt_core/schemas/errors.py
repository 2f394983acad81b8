"""
Module 03 - Schemas
File: errors.py

Purpose: Standard error taxonomy for tree construction, proof creation and
proof verification. Defines both a Pydantic model for structured error
reporting and Python exceptions for control flow.

A proof that simply does not match the committed root is not an error;
verification returns False in that case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Tree construction
    TOO_LARGE_TREE_DEPTH = "TOO_LARGE_TREE_DEPTH"
    TOO_LARGE_LEAF_INDEX = "TOO_LARGE_LEAF_INDEX"

    # Proof decoding
    TOO_LARGE_PROOF_SIZE = "TOO_LARGE_PROOF_SIZE"
    INVALID_PROOF_SIZE = "INVALID_PROOF_SIZE"

    # Digest engine
    UNSUPPORTED_HASH_ALGORITHM = "UNSUPPORTED_HASH_ALGORITHM"

    # Input & configuration
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class SparseMerkleError(BaseModel):
    """
    Error model for structured, serializable error reporting.

    Used by the CLI to emit machine-readable failures without tracebacks.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.TOO_LARGE_LEAF_INDEX],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "SparseMerkleException":
        """Convert this error model to a raisable exception."""
        return SparseMerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class SparseMerkleException(Exception):
    """
    Base exception for all sparse Merkle tree errors.

    Carries structured error information and converts to/from
    SparseMerkleError models. Hashing is deterministic, so none of the
    errors raised by this package are retryable.
    """

    def __init__(
        self,
        message: str,
        code: str = "SPARSE_MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> SparseMerkleError:
        """Convert this exception to a SparseMerkleError model."""
        return SparseMerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TooLargeTreeDepthException(SparseMerkleException):
    """Raised when a tree depth exceeds the supported maximum."""

    def __init__(self, depth: int, depth_max: int) -> None:
        super().__init__(
            message=f"too large tree depth: {depth} (max {depth_max})",
            code=ErrorCodes.TOO_LARGE_TREE_DEPTH,
            details={"depth": depth, "depth_max": depth_max},
        )
        self.depth = depth
        self.depth_max = depth_max


class TooLargeLeafIndexException(SparseMerkleException):
    """Raised when a leaf index or queried index is outside [0, 2^depth)."""

    def __init__(self, index: int, depth: int) -> None:
        super().__init__(
            message=f"too large leaf index: {index} (depth {depth} allows 0..{(1 << depth) - 1})",
            code=ErrorCodes.TOO_LARGE_LEAF_INDEX,
            details={"index": index, "depth": depth},
        )
        self.index = index
        self.depth = depth


class TooLargeProofSizeException(SparseMerkleException):
    """Raised when a proof is longer than any proof the tree could produce."""

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(
            message=f"too large proof size: {size} bytes (max {max_size})",
            code=ErrorCodes.TOO_LARGE_PROOF_SIZE,
            details={"size": size, "max_size": max_size},
        )
        self.size = size
        self.max_size = max_size


class InvalidProofSizeException(SparseMerkleException):
    """Raised when a proof's layout does not match its head bitmap or digest size."""

    def __init__(
        self,
        message: str,
        size: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["size"] = size
        super().__init__(
            message=f"invalid proof size: {message}",
            code=ErrorCodes.INVALID_PROOF_SIZE,
            details=full_details,
        )
        self.size = size


class UnsupportedHashAlgorithmException(SparseMerkleException):
    """Raised when a digest engine cannot be created for an algorithm name."""

    def __init__(self, algorithm: str, reason: str | None = None) -> None:
        details: dict[str, Any] = {"algorithm": algorithm}
        if reason:
            details["reason"] = reason
        super().__init__(
            message=f"unsupported hash algorithm: {algorithm!r}",
            code=ErrorCodes.UNSUPPORTED_HASH_ALGORITHM,
            details=details,
        )
        self.algorithm = algorithm


class SchemaValidationException(SparseMerkleException):
    """Raised when leaf-set input fails validation."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
        )


class ConfigException(SparseMerkleException):
    """Raised when runtime configuration is invalid."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=details,
        )
