"""
Module 03 - Schemas
File: leaves.py

Purpose: Input schema for a sparse leaf assignment read from a file.

File format (JSON or YAML):
    {
      "depth": 3,                      # optional, overrides config
      "hash_algorithm": "sha256",      # optional, overrides config
      "leaves": {"0": "0x0000000000000000", "3": "0x0303030303030303"}
    }
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from smt_core.crypto.hashing import from_hex
from smt_core.merkle.sparse_tree import DEPTH_MAX

from .errors import SchemaValidationException


class LeafSet(BaseModel):
    """
    A sparse assignment of raw leaf values to indices.

    Index bounds against a concrete depth are enforced by the tree itself,
    not here.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    depth: int | None = Field(
        default=None,
        description="Tree depth for these leaves",
        ge=0,
        le=DEPTH_MAX,
    )
    hash_algorithm: str | None = Field(
        default=None,
        description="hashlib algorithm name",
        min_length=1,
    )
    leaves: dict[int, str] = Field(
        default_factory=dict,
        description="Leaf index -> 0x-prefixed hex leaf value",
    )

    @field_validator("leaves", mode="after")
    @classmethod
    def validate_leaves(cls, v: dict[int, str]) -> dict[int, str]:
        """Indices must be non-negative and values valid 0x hex."""
        for index, value in v.items():
            if index < 0:
                raise ValueError(f"Leaf index must be non-negative, got {index}")
            from_hex(value)
        return v

    def to_leaf_map(self) -> dict[int, bytes]:
        """Decode leaf values into the mapping SparseMerkleTree consumes."""
        return {index: from_hex(value) for index, value in self.leaves.items()}

    @classmethod
    def from_data(cls, data: Any) -> "LeafSet":
        """
        Validate raw parsed data.

        A bare mapping with none of the schema keys is read as the leaves
        themselves.

        Raises:
            SchemaValidationException: If the data does not match the schema
        """
        if isinstance(data, dict) and not set(data) & set(cls.model_fields):
            data = {"leaves": data}
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SchemaValidationException(
                f"Invalid leaf set: {e.error_count()} validation error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    @classmethod
    def load(cls, path: str | Path) -> "LeafSet":
        """Load a leaf set from a JSON or YAML file, chosen by suffix."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Leaf file not found: {path}")

        with open(path, "r") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                import yaml
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        return cls.from_data(data or {})


__all__ = ["LeafSet"]
