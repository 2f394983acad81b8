"""
Sparse Merkle tree core library.

Subpackages:
- crypto: digest engine adapter and hex helpers
- merkle: tree builder, proof codec and verifier
- schemas: error taxonomy and input schemas
- config: runtime configuration
"""

__version__ = "0.1.0"
