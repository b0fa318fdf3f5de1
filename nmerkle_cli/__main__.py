"""
Module execution entry point.

Allows running with: python -m nmerkle_cli
"""

import sys
from nmerkle_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
