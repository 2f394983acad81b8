"""
CLI Prove Command

Create a membership proof for one index. Indices never supplied in the leaf
file produce non-inclusion proofs.

Usage:
    smt prove leaves.json INDEX [--out FILE] [--depth N] [--hash NAME] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from smt_core.crypto.hashing import to_hex
from smt_core.merkle import MembershipProof
from smt_core.schemas.errors import SparseMerkleException
from smt_cli.commands.common import EXIT_SUCCESS, load_tree, report_error


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    """Handle prove command."""
    try:
        tree, _, _ = load_tree(args)
        proof = tree.create_membership_proof(args.index)
    except (SparseMerkleException, FileNotFoundError, ValueError) as e:
        return report_error(e, args.json)

    decoded = MembershipProof.decode(proof, tree.hash_size, tree.depth)
    proof_hex = to_hex(proof)

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(proof_hex + "\n")
        logger.info(f"Wrote proof to: {out_path}")

    if args.json:
        print(json.dumps({
            "index": args.index,
            "inclusion": args.index in tree.explicit_nodes(tree.depth),
            "head": decoded.head,
            "siblings": decoded.sibling_count,
            "size": len(proof),
            "root": to_hex(tree.root),
            "proof": proof_hex,
        }, indent=2))
    else:
        print(proof_hex)

    return EXIT_SUCCESS
