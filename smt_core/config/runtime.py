"""
Runtime Configuration

Central configuration for tree parameters (digest algorithm, depth) and logging.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from smt_core.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashlibDigest, new_digest
from smt_core.merkle.sparse_tree import DEPTH_MAX
from smt_core.schemas.errors import ConfigException, TooLargeTreeDepthException

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "SMT_"


@dataclass
class TreeConfig:
    """
    Parameters that fix a tree's shape and hash function.

    Each call to new_hasher() returns an independent engine, so one config
    can safely describe many trees used from different threads.
    """
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    depth: int = DEPTH_MAX

    def __post_init__(self):
        if isinstance(self.depth, bool) or not isinstance(self.depth, int):
            raise ConfigException(
                f"Tree depth must be an integer, got {self.depth!r}",
                details={"depth": repr(self.depth)},
            )
        if self.depth < 0:
            raise ConfigException(
                f"Tree depth must be non-negative, got {self.depth}",
                details={"depth": self.depth},
            )
        if self.depth > DEPTH_MAX:
            raise TooLargeTreeDepthException(self.depth, DEPTH_MAX)
        # Fail early on unknown algorithms
        new_digest(self.hash_algorithm)

    def new_hasher(self) -> HashlibDigest:
        """Create a fresh digest engine for one tree."""
        return new_digest(self.hash_algorithm)

    @property
    def hash_size(self) -> int:
        return self.new_hasher().digest_size


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (a .env file is honoured)
    - YAML or JSON file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - SMT_HASH_ALGORITHM: hashlib algorithm name
        - SMT_DEPTH: Tree depth (0..64)
        - SMT_LOG_LEVEL: Log level
        - SMT_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv(
                f"{ENV_PREFIX}HASH_ALGORITHM"
            )
        if os.getenv(f"{ENV_PREFIX}DEPTH"):
            raw_depth = os.getenv(f"{ENV_PREFIX}DEPTH", "")
            try:
                overrides.setdefault("tree", {})["depth"] = int(raw_depth)
            except ValueError as e:
                raise ConfigException(
                    f"{ENV_PREFIX}DEPTH must be an integer, got {raw_depth!r}",
                    details={"depth": raw_depth},
                ) from e

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML or JSON file, chosen by suffix."""
        path = Path(path)
        if path.suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        if not isinstance(data, dict):
            raise ConfigException(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )

        tree_data = data.get("tree", {})
        logging_data = data.get("logging", {})

        try:
            tree = TreeConfig(**tree_data) if tree_data else TreeConfig()
            log_config = LoggingConfig(**logging_data) if logging_data else LoggingConfig()
        except TypeError as e:
            raise ConfigException(f"Invalid configuration: {e}") from e

        return cls(
            tree=tree,
            logging=log_config,
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            tree_data = {
                "hash_algorithm": new_config.tree.hash_algorithm,
                "depth": new_config.tree.depth,
            }
            tree_data.update(overrides["tree"])
            # Rebuild so the overrides are validated
            new_config.tree = TreeConfig(**tree_data)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "hash_algorithm": self.tree.hash_algorithm,
                "depth": self.tree.depth,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config
