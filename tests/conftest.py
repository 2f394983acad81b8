"""
Pytest configuration and shared fixtures for sparse Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures.common import (  # noqa: E402
    make_hasher,
    make_sample_leaves,
    make_tree,
)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def hasher():
    """Provide a fresh SHA-256 digest engine."""
    return make_hasher("sha256")


@pytest.fixture
def sample_leaves():
    """Provide the two-leaf assignment used by the reference vectors."""
    return make_sample_leaves()


@pytest.fixture
def sample_tree(sample_leaves):
    """Provide a depth-3 SHA-256 tree over the sample leaves."""
    return make_tree(depth=3, leaves=sample_leaves)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove SMT_* variables so config tests start from defaults."""
    for name in ("SMT_HASH_ALGORITHM", "SMT_DEPTH", "SMT_LOG_LEVEL", "SMT_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch

