"""
Module execution entry point.

Allows running with: python -m smt_cli
"""

import sys
from smt_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
