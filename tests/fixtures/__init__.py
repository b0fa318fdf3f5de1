"""
Test fixtures package for nmerkle tests.

Usage:
    from fixtures import make_tree, make_digit_leaves

    def test_something():
        tree = make_tree(9, arity=3, hash_name="md5")
"""

from .trees import (
    DATA_NOT_IN_TREE,
    KNOWN_ROOTS,
    make_digit_leaves,
    make_tree,
)

__all__ = [
    "DATA_NOT_IN_TREE",
    "KNOWN_ROOTS",
    "make_digit_leaves",
    "make_tree",
]
