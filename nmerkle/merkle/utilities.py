"""
Module 03 - Tree Shape Arithmetic

Row sizes, row count and total node count of a perfect n-ary tree.

A tree with `leaf_count` leaves and branching factor `arity` has rows
leaf_count, leaf_count / arity, ..., 1. Every division must be exact,
so leaf_count must be a positive power of arity.

Naming note: "row_count" counts rows including the leaf row and the root
row. Two leaves under a single root have a row_count of 2 (a height of 1).
"""
from __future__ import annotations

from nmerkle.schemas.errors import InvalidArityException, InvalidLeafCountException


def check_arity(arity: int) -> None:
    """Raise InvalidArityException unless arity is an integer >= 2."""
    if isinstance(arity, bool) or not isinstance(arity, int) or arity < 2:
        raise InvalidArityException(
            f"Arity must be an integer >= 2, got {arity!r}",
            arity=arity if isinstance(arity, int) else None,
        )


def compute_row_sizes(leaf_count: int, arity: int) -> list[int]:
    """
    Compute the element count of every row, leaves first.

    Example:
        >>> compute_row_sizes(9, 3)
        [9, 3, 1]

    Raises:
        InvalidArityException: If arity < 2
        InvalidLeafCountException: If leaf_count < arity or some row
            count is not divisible by arity
    """
    check_arity(arity)

    if leaf_count < arity:
        raise InvalidLeafCountException(
            f"Need at least {arity} leaves for arity {arity}, got {leaf_count}",
            leaf_count=leaf_count,
            arity=arity,
        )

    sizes = [leaf_count]
    n = leaf_count
    while n > 1:
        if n % arity != 0:
            raise InvalidLeafCountException(
                f"Wrong leaf count: {leaf_count} leaves do not form a perfect "
                f"tree of arity {arity} (row of {n} is not divisible by {arity})",
                leaf_count=leaf_count,
                arity=arity,
            )
        n //= arity
        sizes.append(n)

    return sizes


def compute_row_starts(row_sizes: list[int]) -> list[int]:
    """
    Compute the flat index of the first node of every row.

    Example:
        >>> compute_row_starts([8, 4, 2, 1])
        [0, 8, 12, 14]
    """
    starts = []
    offset = 0
    for size in row_sizes:
        starts.append(offset)
        offset += size
    return starts


def compute_row_count(leaf_count: int, arity: int) -> int:
    """Number of rows from the leaf row to the root row, inclusive."""
    return len(compute_row_sizes(leaf_count, arity))


def compute_tree_len(leaf_count: int, arity: int) -> int:
    """Total number of nodes across all rows."""
    return sum(compute_row_sizes(leaf_count, arity))


def is_valid_leaf_count(leaf_count: int, arity: int) -> bool:
    """True if leaf_count leaves form a perfect tree of the given arity."""
    try:
        compute_row_sizes(leaf_count, arity)
    except (InvalidArityException, InvalidLeafCountException):
        return False
    return True


__all__ = [
    "check_arity",
    "compute_row_sizes",
    "compute_row_starts",
    "compute_row_count",
    "compute_tree_len",
    "is_valid_leaf_count",
]
