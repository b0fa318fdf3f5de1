"""
CLI command modules.
"""

from nmerkle_cli.commands import proof, tree

__all__ = ["proof", "tree"]
