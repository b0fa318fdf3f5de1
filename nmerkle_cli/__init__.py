"""
Module 05 - nmerkle CLI

Command-line interface for building Merkle trees and checking proofs.

Usage:
    python -m nmerkle_cli root 0 1 2 3 4 5 6 7
    python -m nmerkle_cli prove 3 0 1 2 3 4 5 6 7
    python -m nmerkle_cli validate 3 3 0 1 2 3 4 5 6 7
    python -m nmerkle_cli hashes
"""

__version__ = "0.1.0"
