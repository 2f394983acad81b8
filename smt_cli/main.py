"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m smt_cli root <leaves> [--depth N] [--hash NAME] [--json]
    python -m smt_cli prove <leaves> <index> [--out PATH] [--json]
    python -m smt_cli verify <leaves> <index> <proof> [--leaf 0xHEX | --empty] [--json]
    python -m smt_cli config --init | --show

Environment Variables:
    SMT_HASH_ALGORITHM    hashlib algorithm name (default: sha256)
    SMT_DEPTH             Tree depth (default: 64)
    SMT_LOG_LEVEL         Log level (default: INFO)
    SMT_LOG_FILE          Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from smt_cli import __version__
from smt_cli.commands import prove, root, verify
from smt_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from smt_cli.config import get_default_config_template, load_config


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_tree_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "leaves",
        type=str,
        help="JSON or YAML file mapping leaf index to 0x hex value",
    )
    parser.add_argument(
        "--depth", "-d",
        type=int,
        default=None,
        help="Tree depth (overrides leaf file and config)",
    )
    parser.add_argument(
        "--hash",
        type=str,
        default=None,
        help="hashlib algorithm name (overrides leaf file and config)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="smt",
        description="Sparse Merkle tree CLI - Compute roots, create and verify membership proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./smt.yaml or ~/.config/smt/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the root of the tree built from a leaf file",
    )
    _add_tree_arguments(root_parser)
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Create a membership proof for one index",
        description="Create an inclusion or non-inclusion proof for one index.",
    )
    _add_tree_arguments(prove_parser)
    prove_parser.add_argument("index", type=int, help="Leaf index to prove")
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Also write the hex proof to this file",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a membership proof",
        description="Verify a proof against the tree built from a leaf file.",
    )
    _add_tree_arguments(verify_parser)
    verify_parser.add_argument("index", type=int, help="Leaf index the proof is for")
    verify_parser.add_argument(
        "proof",
        type=str,
        help="0x hex proof, or @FILE containing one",
    )
    claim_group = verify_parser.add_mutually_exclusive_group()
    claim_group.add_argument(
        "--leaf",
        type=str,
        default=None,
        help="Claimed 0x hex leaf value to check against the root",
    )
    claim_group.add_argument(
        "--empty",
        action="store_true",
        default=False,
        help="Check the claim that the index holds no leaf",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="smt.yaml",
        help="Path for config file (default: smt.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (SMT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: smt config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
