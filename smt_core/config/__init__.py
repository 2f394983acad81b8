"""
Runtime Configuration Module

Provides configuration loading and management for the sparse Merkle tree.
"""

from .runtime import (
    RuntimeConfig,
    TreeConfig,
    LoggingConfig,
    get_default_config,
)

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "LoggingConfig",
    "get_default_config",
]
