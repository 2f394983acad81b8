"""
CLI Root Command

Build a tree from a leaf file and print its root.

Usage:
    smt root leaves.json [--depth N] [--hash NAME] [--json]
"""

from __future__ import annotations

import json
from argparse import Namespace

from smt_core.crypto.hashing import to_hex
from smt_core.schemas.errors import SparseMerkleException
from smt_cli.commands.common import EXIT_SUCCESS, load_tree, report_error


def root_cmd(args: Namespace) -> int:
    """Handle root command."""
    try:
        tree, _, tree_config = load_tree(args)
    except (SparseMerkleException, FileNotFoundError, ValueError) as e:
        return report_error(e, args.json)

    summary = {
        "root": to_hex(tree.root),
        "depth": tree.depth,
        "hash_algorithm": tree_config.hash_algorithm,
        "leaves": tree.leaf_count,
    }

    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        for key, value in summary.items():
            print(f"{key}: {value}")

    return EXIT_SUCCESS
