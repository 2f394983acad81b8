"""
Sparse Merkle tree CLI

Command-line interface for building trees and creating/verifying proofs.

Usage:
    python -m smt_cli root leaves.json --depth 16
    python -m smt_cli prove leaves.json 42
    python -m smt_cli verify leaves.json 42 0x0000...
    python -m smt_cli config --show
"""

__version__ = "0.1.0"
