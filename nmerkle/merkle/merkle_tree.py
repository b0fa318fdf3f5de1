"""
Module 03 - Merkle Tree Implementation
Deterministic n-ary Merkle tree construction and structural queries.

Owner: Protocol/Crypto Engineer
Module ID: M03

A Merkle tree is a tree in which every non-leaf node is the hash of its
child nodes. For arity = 2:

            root = h1234 = H(h12 + h34)
           /                           \\
     h12 = H(h1 + h2)             h34 = H(h3 + h4)
      /          \\                 /          \\
  h1 = H(x1)  h2 = H(x2)       h3 = H(x3)  h4 = H(x4)

Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(serialize(element))
2. Parent hashing: parent = H(child_0 + child_1 + ... + child_{arity-1}),
   children concatenated strictly left to right
3. No padding: every row must divide evenly by arity down to a single root
4. Node layout: one flat row-major sequence; row 0 holds the leaves,
   the last index holds the root

Parent/child relationships are not stored. They are derived from the
node index, the arity and the row boundaries.

Determinism Notes:
- No randomness or non-deterministic ordering
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

import logging
from bisect import bisect_right
from typing import Any, Callable, Iterable, Sequence

from nmerkle.crypto.hashing import SHA256, Hasher, hash_concat
from nmerkle.merkle.utilities import compute_row_sizes, compute_row_starts
from nmerkle.schemas.canonical import serialize_element
from nmerkle.schemas.errors import (
    DigestSizeMismatchException,
    IndexOutOfRangeException,
    LeafHasNoChildrenException,
    RootHasNoParentException,
)


logger = logging.getLogger(__name__)


def merkle_parent(children: Sequence[bytes], hash_fn: Hasher = SHA256) -> bytes:
    """
    Compute the parent hash of a group of sibling nodes.

    Order is significant: swapping two children changes the parent.

    Args:
        children: Child digests in left-to-right order
        hash_fn: Hash function used for the whole tree

    Returns:
        H(children[0] + children[1] + ...)
    """
    return hash_concat(children, hash_fn)


class MerkleTree:
    """
    A fully materialized, immutable n-ary Merkle tree.

    Build one with build_merkle_tree() or MerkleTree(leaves, ...). Once the
    constructor returns, nothing about the tree can change, so a tree may be
    shared freely between threads.

    Example:
        >>> tree = MerkleTree([b"a", b"b", b"c", b"d"])
        >>> tree.row_count, len(tree)
        (3, 7)
        >>> tree.parent(0), tree.children(6)
        (4, (4, 5))
    """

    def __init__(
        self,
        leaves: Iterable[Any],
        hash_fn: Hasher = SHA256,
        arity: int = 2,
        serializer: Callable[[Any], bytes] = serialize_element,
    ) -> None:
        elements = list(leaves)

        # Validate shape before any hashing happens
        row_sizes = compute_row_sizes(len(elements), arity)
        row_starts = compute_row_starts(row_sizes)

        self._arity = arity
        self._hash_fn = hash_fn
        self._serializer = serializer
        self._digest_size = hash_fn.digest_size
        self._row_sizes = tuple(row_sizes)
        self._row_starts = tuple(row_starts)

        digests: list[bytes] = [self._checked(hash_fn(serializer(e))) for e in elements]

        for row in range(1, len(row_sizes)):
            child_start = row_starts[row - 1]
            for offset in range(row_sizes[row]):
                first = child_start + offset * arity
                node = merkle_parent(digests[first:first + arity], hash_fn)
                digests.append(self._checked(node))

        self._digests: tuple[bytes, ...] = tuple(digests)

        logger.debug(
            f"Built Merkle tree: leaves={self.leaf_count} arity={arity} "
            f"rows={self.row_count} nodes={len(self._digests)} "
            f"hash={_hash_name(hash_fn)}"
        )

    @classmethod
    def build(
        cls,
        leaves: Iterable[Any],
        hash_fn: Hasher = SHA256,
        arity: int = 2,
        serializer: Callable[[Any], bytes] = serialize_element,
    ) -> "MerkleTree":
        """Alias for the constructor."""
        return cls(leaves, hash_fn=hash_fn, arity=arity, serializer=serializer)

    def _checked(self, digest: bytes) -> bytes:
        if len(digest) != self._digest_size:
            raise DigestSizeMismatchException(
                f"Hash function {_hash_name(self._hash_fn)} returned "
                f"{len(digest)} bytes, expected {self._digest_size}",
                expected=self._digest_size,
                actual=len(digest),
            )
        return bytes(digest)

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    @property
    def arity(self) -> int:
        return self._arity

    @property
    def leaf_count(self) -> int:
        return self._row_sizes[0]

    @property
    def row_count(self) -> int:
        return len(self._row_sizes)

    @property
    def digest_size(self) -> int:
        return self._digest_size

    @property
    def hash_fn(self) -> Hasher:
        return self._hash_fn

    @property
    def serializer(self) -> Callable[[Any], bytes]:
        return self._serializer

    @property
    def digests(self) -> tuple[bytes, ...]:
        """Every node digest in row-major order."""
        return self._digests

    def __len__(self) -> int:
        return len(self._digests)

    def row_size(self, row: int) -> int:
        self._check_row(row)
        return self._row_sizes[row]

    def row_start(self, row: int) -> int:
        """Flat index of the first node in a row."""
        self._check_row(row)
        return self._row_starts[row]

    def row(self, row: int) -> tuple[bytes, ...]:
        """Digests of a single row, left to right."""
        start = self.row_start(row)
        return self._digests[start:start + self._row_sizes[row]]

    def leaves(self) -> tuple[bytes, ...]:
        """Row-0 digests."""
        return self.row(0)

    def row_of(self, index: int) -> int:
        """Row number that holds a node."""
        self._check_node(index)
        return bisect_right(self._row_starts, index) - 1

    # -------------------------------------------------------------------------
    # Node access
    # -------------------------------------------------------------------------

    def root(self) -> bytes:
        return self._digests[-1]

    def digest(self, index: int) -> bytes:
        self._check_node(index)
        return self._digests[index]

    def __getitem__(self, index: int) -> bytes:
        return self.digest(index)

    def is_leaf(self, index: int) -> bool:
        return self.row_of(index) == 0

    def is_root(self, index: int) -> bool:
        self._check_node(index)
        return index == len(self._digests) - 1

    def children(self, index: int) -> tuple[int, ...]:
        """
        Indices of a node's children in the row below, left to right.

        Raises:
            LeafHasNoChildrenException: If index is a leaf
            IndexOutOfRangeException: If index is not a node of this tree
        """
        row = self.row_of(index)
        if row == 0:
            raise LeafHasNoChildrenException(
                f"Node {index} is a leaf and has no children",
                index=index,
            )
        offset = index - self._row_starts[row]
        first = self._row_starts[row - 1] + offset * self._arity
        return tuple(range(first, first + self._arity))

    def parent(self, index: int) -> int:
        """
        Index of a node's parent in the row above.

        Raises:
            RootHasNoParentException: If index is the root
            IndexOutOfRangeException: If index is not a node of this tree
        """
        row = self.row_of(index)
        if row == self.row_count - 1:
            raise RootHasNoParentException(
                f"Node {index} is the root and has no parent",
                index=index,
            )
        offset = index - self._row_starts[row]
        return self._row_starts[row + 1] + offset // self._arity

    def position(self, index: int) -> int:
        """Position of a node among its siblings (0 .. arity-1)."""
        row = self.row_of(index)
        return (index - self._row_starts[row]) % self._arity

    def node_path(self, leaf_index: int) -> list[int]:
        """Node indices from a leaf up to and including the root."""
        self._check_leaf(leaf_index)
        path = [leaf_index]
        node = leaf_index
        while node != len(self._digests) - 1:
            node = self.parent(node)
            path.append(node)
        return path

    def hash_path(self, leaf_index: int) -> list[bytes]:
        """
        Digests from a leaf up to and including the root.

        Follows parent() until the root is reached, so the result always
        has row_count entries: [leaf, parent(leaf), ..., root].

        Raises:
            IndexOutOfRangeException: If leaf_index is not in [0, leaf_count)
        """
        return [self._digests[node] for node in self.node_path(leaf_index)]

    def hash_element(self, element: Any) -> bytes:
        """Hash an element exactly the way leaves were hashed."""
        return self._hash_fn(self._serializer(element))

    # -------------------------------------------------------------------------
    # Validation helpers
    # -------------------------------------------------------------------------

    def _check_node(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._digests):
            raise IndexOutOfRangeException(
                f"Node index {index!r} out of range for tree of {len(self._digests)} nodes",
                index=index if isinstance(index, int) else None,
                limit=len(self._digests),
            )

    def _check_leaf(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < self.leaf_count:
            raise IndexOutOfRangeException(
                f"Leaf index {index!r} out of range for {self.leaf_count} leaves",
                index=index if isinstance(index, int) else None,
                limit=self.leaf_count,
            )

    def _check_row(self, row: int) -> None:
        if isinstance(row, bool) or not isinstance(row, int) or not 0 <= row < self.row_count:
            raise IndexOutOfRangeException(
                f"Row {row!r} out of range for tree of {self.row_count} rows",
                index=row if isinstance(row, int) else None,
                limit=self.row_count,
            )

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> str:
        """
        One line per node: the node and its digest, followed by its
        children for inner nodes or "--- leaf" for leaves.
        """
        lines = []
        for index, digest in enumerate(self._digests):
            head = f"({index}, {digest.hex()})"
            if index < self.leaf_count:
                lines.append(f"{head} --- leaf")
            else:
                kids = "  ".join(
                    f"({child}, {self._digests[child].hex()})"
                    for child in self.children(index)
                )
                lines.append(f"{head} <-- {kids}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaves={self.leaf_count}, arity={self._arity}, "
            f"rows={self.row_count}, hash={_hash_name(self._hash_fn)!r}, "
            f"root={self.root().hex()!r})"
        )


def _hash_name(hash_fn: Hasher) -> str:
    return getattr(hash_fn, "name", type(hash_fn).__name__)


def build_merkle_tree(
    leaves: Iterable[Any],
    hash_fn: Hasher = SHA256,
    arity: int = 2,
    serializer: Callable[[Any], bytes] = serialize_element,
) -> MerkleTree:
    """
    Build a Merkle tree from an ordered sequence of leaf elements.

    Algorithm:
    1. Check the shape: arity >= 2, leaf count a positive power of arity
    2. Row 0: hash each serialized element
    3. Row r > 0: hash each group of arity consecutive digests of row r-1
    4. Repeat until the single root remains

    Args:
        leaves: Ordered leaf elements (order is preserved, never sorted)
        hash_fn: Hash function with a digest_size attribute
        arity: Branching factor
        serializer: Maps an element to the bytes that get hashed

    Returns:
        The built MerkleTree

    Raises:
        InvalidArityException: If arity < 2
        InvalidLeafCountException: If the leaves cannot form a perfect tree
        DigestSizeMismatchException: If hash_fn returns the wrong length
    """
    return MerkleTree(leaves, hash_fn=hash_fn, arity=arity, serializer=serializer)


def build_merkle_root(
    leaves: Iterable[Any],
    hash_fn: Hasher = SHA256,
    arity: int = 2,
    serializer: Callable[[Any], bytes] = serialize_element,
) -> bytes:
    """Build a tree and return only its root digest."""
    return build_merkle_tree(leaves, hash_fn=hash_fn, arity=arity, serializer=serializer).root()


__all__ = [
    "MerkleTree",
    "merkle_parent",
    "build_merkle_tree",
    "build_merkle_root",
]
