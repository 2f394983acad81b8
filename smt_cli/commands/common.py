"""
Shared helpers for the tree commands: leaf loading and tree construction.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from smt_core.config.runtime import RuntimeConfig, TreeConfig
from smt_core.merkle import SparseMerkleTree
from smt_core.schemas.errors import SparseMerkleException
from smt_core.schemas.leaves import LeafSet


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def resolve_tree_config(args: Namespace, leaf_set: LeafSet) -> TreeConfig:
    """
    Pick depth and hash algorithm.

    Precedence: command-line flags, then the leaf file, then configuration.
    """
    config: RuntimeConfig = getattr(args, "cli_config", None) or RuntimeConfig()

    depth = args.depth
    if depth is None:
        depth = leaf_set.depth if leaf_set.depth is not None else config.tree.depth

    hash_algorithm = args.hash
    if hash_algorithm is None:
        hash_algorithm = leaf_set.hash_algorithm or config.tree.hash_algorithm

    return TreeConfig(hash_algorithm=hash_algorithm, depth=depth)


def load_tree(args: Namespace) -> tuple[SparseMerkleTree, LeafSet, TreeConfig]:
    """Load the leaf file named by args.leaves and build the tree."""
    leaf_path = Path(args.leaves)
    logger.info(f"Loading leaves from: {leaf_path}")
    leaf_set = LeafSet.load(leaf_path)

    tree_config = resolve_tree_config(args, leaf_set)
    tree = SparseMerkleTree.from_config(tree_config, leaf_set.to_leaf_map())
    logger.info(
        f"Built tree: depth={tree.depth} hash={tree_config.hash_algorithm} "
        f"leaves={tree.leaf_count}"
    )
    return tree, leaf_set, tree_config


def report_error(e: Exception, as_json: bool = False) -> int:
    """Print an error to stderr (or a JSON error document to stdout)."""
    if as_json:
        if isinstance(e, SparseMerkleException):
            model = e.to_error_model()
        else:
            model = SparseMerkleException(str(e), code=type(e).__name__).to_error_model()
        print(json.dumps(model.model_dump(), indent=2))
    else:
        print(f"Error: {e}", file=sys.stderr)
    return EXIT_RUNTIME_ERROR
