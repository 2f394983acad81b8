"""
CLI Verify Command

Verify a membership proof against the tree built from a leaf file.

Without --leaf the proof is checked against the tree's own value for the
index. With --leaf the claimed value is hashed and checked against the root
instead; --empty checks a non-inclusion claim the same way.

Usage:
    smt verify leaves.json INDEX PROOF [--leaf 0xHEX | --empty] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from smt_core.crypto.hashing import from_hex, to_hex
from smt_core.merkle import SparseMerkleVerifier
from smt_core.schemas.errors import SparseMerkleException
from smt_cli.commands.common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    load_tree,
    report_error,
)


logger = logging.getLogger(__name__)


def read_proof(value: str) -> bytes:
    """Accept a 0x hex proof, or @path to a file holding one."""
    if value.startswith("@"):
        value = Path(value[1:]).read_text().strip()
    return from_hex(value)


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    try:
        tree, _, tree_config = load_tree(args)
        proof = read_proof(args.proof)

        if args.leaf is not None or args.empty:
            leaf = None if args.empty else from_hex(args.leaf)
            mode = "claimed-leaf"
            ok = SparseMerkleVerifier.verify_leaf_in_root(
                tree_config.new_hasher(),
                tree.depth,
                args.index,
                leaf,
                proof,
                tree.root,
            )
        else:
            mode = "tree"
            ok = tree.verify_membership_proof(args.index, proof)
    except (SparseMerkleException, FileNotFoundError, ValueError) as e:
        return report_error(e, args.json)

    if not ok:
        logger.warning(f"Proof for index {args.index} does not match root {to_hex(tree.root)}")

    if args.json:
        print(json.dumps({
            "index": args.index,
            "mode": mode,
            "root": to_hex(tree.root),
            "valid": ok,
        }, indent=2))
    else:
        print(f"valid: {str(ok).lower()}")

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED
