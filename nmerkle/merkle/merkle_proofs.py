"""
Module 04 - Merkle Proofs
Inclusion proof generation and validation for n-ary Merkle trees.

Owner: Protocol/Crypto Engineer
Module ID: M04

Two proof formats are provided:

1. MerkleProof (path proof): the digests from a leaf up to the root, as
   recorded in an already-built tree. Validation hashes the claimed element
   and compares it with the recorded leaf digest; it trusts the tree's
   stored digests and does not recompute any parent.

2. DetachedProof (sibling proof): for every row below the root, the
   position of the running digest within its sibling group and the other
   arity-1 sibling digests. Validation recomputes every parent locally and
   compares the result to a separately supplied trusted root, so it needs
   nothing from the tree.

Both modes agree on every well-formed input: they accept the element a
leaf was built from and reject anything else.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from nmerkle.crypto.hashing import SHA256, Hasher, hash_element, to_hex
from nmerkle.merkle.merkle_tree import MerkleTree, merkle_parent
from nmerkle.merkle.utilities import compute_row_count, is_valid_leaf_count
from nmerkle.schemas.canonical import serialize_element
from nmerkle.schemas.errors import ErrorCodes, MerkleException
from nmerkle.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


# =============================================================================
# Path proofs
# =============================================================================

@dataclass(frozen=True)
class MerkleProof:
    """
    A path-of-digests proof for a single leaf.

    Attributes:
        leaf_index: The 0-based index of the leaf in the tree
        path: Digests from the leaf's own digest up to and including the root
        hash_fn: Hash function the tree was built with
        serializer: Element serializer the tree was built with
    """
    leaf_index: int
    path: tuple[bytes, ...]
    hash_fn: Hasher = field(default=SHA256, compare=False, repr=False)
    serializer: Callable[[Any], bytes] = field(
        default=serialize_element, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.leaf_index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.leaf_index}")
        if not self.path:
            raise ValueError("Proof path must contain at least the leaf digest")
        object.__setattr__(self, "path", tuple(self.path))

    @property
    def leaf(self) -> bytes:
        """Digest recorded for the leaf."""
        return self.path[0]

    @property
    def root(self) -> bytes:
        """Root digest the path ends at."""
        return self.path[-1]

    def validate(self, element: Any, tree: MerkleTree | None = None) -> bool:
        """
        Check whether an element is the one this proof's leaf was built from.

        Args:
            element: Claimed leaf element (hashed like the tree's leaves)
            tree: Optional tree to check the proof against; when given, the
                  proof's path must equal the tree's path for the same leaf

        Returns:
            True if the element hashes to the recorded leaf digest (and, with
            a tree, the proof belongs to that tree), False otherwise
        """
        claimed = hash_element(element, self.hash_fn, self.serializer)
        if claimed != self.leaf:
            logger.debug(f"Leaf {self.leaf_index}: claimed digest does not match proof")
            return False

        if tree is not None:
            if self.leaf_index >= tree.leaf_count:
                logger.debug(f"Leaf {self.leaf_index}: not a leaf of the given tree")
                return False
            if tuple(tree.hash_path(self.leaf_index)) != self.path:
                logger.debug(f"Leaf {self.leaf_index}: proof path differs from tree")
                return False

        return True


def build_merkle_proof(tree: MerkleTree, leaf_index: int) -> MerkleProof:
    """
    Generate a path proof for the leaf at the given index.

    Returns:
        MerkleProof with path = tree.hash_path(leaf_index)

    Raises:
        IndexOutOfRangeException: If leaf_index is not in [0, leaf_count)
    """
    path = tree.hash_path(leaf_index)
    return MerkleProof(
        leaf_index=leaf_index,
        path=tuple(path),
        hash_fn=tree.hash_fn,
        serializer=tree.serializer,
    )


def validate_merkle_proof(tree: MerkleTree, leaf_index: int, element: Any) -> bool:
    """
    Validate a claimed element against a built tree.

    Returns True only if:
    1. H(serialize(element)) equals the digest stored at leaf_index, and
    2. the recorded parent chain from that leaf reaches the tree's root.

    No parent digest is recomputed; the tree's stored digests are trusted.
    Use verify_detached_proof() when the tree itself is not trusted.

    Raises:
        IndexOutOfRangeException: If leaf_index is not in [0, leaf_count)
    """
    nodes = tree.node_path(leaf_index)

    if tree.hash_element(element) != tree.digest(leaf_index):
        logger.debug(f"Leaf {leaf_index}: claimed element does not match stored digest")
        return False

    if len(nodes) != tree.row_count or not tree.is_root(nodes[-1]):
        logger.debug(f"Leaf {leaf_index}: parent chain does not reach the root")
        return False

    return True


# =============================================================================
# Detached proofs
# =============================================================================

@dataclass(frozen=True)
class ProofStep:
    """
    One row of a detached proof.

    Attributes:
        position: Where the running digest sits in the arity-wide
                  concatenation (0 = leftmost)
        siblings: The other arity-1 digests of the group, left to right
    """
    position: int
    siblings: tuple[bytes, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "siblings", tuple(self.siblings))

    def combine(self, digest: bytes, hash_fn: Hasher = SHA256) -> bytes:
        """Hash the running digest together with its siblings."""
        children = list(self.siblings)
        children.insert(self.position, digest)
        return merkle_parent(children, hash_fn)


@dataclass(frozen=True)
class DetachedProof:
    """
    A sibling-based proof that can be checked without the tree.

    Attributes:
        leaf_index: The 0-based index of the leaf in the tree
        arity: Branching factor of the tree
        leaf_count: Number of leaves in the tree; fixes how many steps
                    a well-formed proof carries
        steps: One ProofStep per row below the root, bottom-up
    """
    leaf_index: int
    arity: int
    leaf_count: int
    steps: tuple[ProofStep, ...]

    def __post_init__(self) -> None:
        if self.leaf_index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.leaf_index}")
        object.__setattr__(self, "steps", tuple(self.steps))

    def to_dict(self) -> dict[str, Any]:
        return {
            "leaf_index": self.leaf_index,
            "arity": self.arity,
            "leaf_count": self.leaf_count,
            "steps": [
                {
                    "position": step.position,
                    "siblings": [to_hex(s) for s in step.siblings],
                }
                for step in self.steps
            ],
        }


def build_detached_proof(tree: MerkleTree, leaf_index: int) -> DetachedProof:
    """
    Generate a detached proof for the leaf at the given index.

    Algorithm:
    1. Walk from the leaf to the root via parent()
    2. At each node, record its position among its siblings and the
       digests of the other children of the same parent

    Raises:
        IndexOutOfRangeException: If leaf_index is not in [0, leaf_count)
    """
    steps: list[ProofStep] = []
    for node in tree.node_path(leaf_index)[:-1]:
        group = tree.children(tree.parent(node))
        steps.append(
            ProofStep(
                position=tree.position(node),
                siblings=tuple(tree.digest(i) for i in group if i != node),
            )
        )
    return DetachedProof(
        leaf_index=leaf_index,
        arity=tree.arity,
        leaf_count=tree.leaf_count,
        steps=tuple(steps),
    )


def verify_detached_proof(
    proof: DetachedProof,
    element: Any,
    trusted_root: bytes,
    hash_fn: Hasher = SHA256,
    serializer: Callable[[Any], bytes] = serialize_element,
    leaf_count: int | None = None,
) -> bool:
    """
    Verify a detached proof against a trusted root.

    Algorithm:
    1. The proof's leaf_count must form a perfect tree of its arity, its
       leaf_index must lie in [0, leaf_count) and it must carry exactly
       one step per row below the root
    2. Start with H(serialize(element))
    3. For each step, bottom-up:
       - the step's position must equal index % arity
       - it must carry exactly arity-1 siblings of the running digest's size
       - hash = H(siblings with the running digest inserted at position)
       - index = index // arity
    4. Check the computed root equals trusted_root

    The root alone does not commit to the tree's height. Pass the trusted
    leaf_count alongside the trusted root to rule out a proof that claims
    a shorter tree and treats an inner node's children as a leaf.

    Returns:
        True if the proof is valid, False otherwise (malformed proofs
        are rejected, never raised)
    """
    if leaf_count is not None and proof.leaf_count != leaf_count:
        logger.debug(f"Detached proof claims {proof.leaf_count} leaves, expected {leaf_count}")
        return False
    if not is_valid_leaf_count(proof.leaf_count, proof.arity):
        logger.debug(f"Detached proof has invalid shape: {proof.leaf_count} leaves, arity {proof.arity}")
        return False
    if not proof.leaf_index < proof.leaf_count:
        logger.debug(f"Detached proof leaf {proof.leaf_index} out of range")
        return False
    if len(proof.steps) != compute_row_count(proof.leaf_count, proof.arity) - 1:
        logger.debug(f"Detached proof has {len(proof.steps)} steps, wrong for its tree height")
        return False

    current = hash_element(element, hash_fn, serializer)
    index = proof.leaf_index

    for row, step in enumerate(proof.steps):
        if step.position != index % proof.arity:
            logger.debug(f"Detached proof row {row}: position {step.position} inconsistent with index")
            return False
        if len(step.siblings) != proof.arity - 1:
            logger.debug(f"Detached proof row {row}: expected {proof.arity - 1} siblings")
            return False
        if any(len(s) != len(current) for s in step.siblings):
            logger.debug(f"Detached proof row {row}: sibling digest has wrong size")
            return False

        current = step.combine(current, hash_fn)
        index //= proof.arity

    return current == trusted_root


# =============================================================================
# Convenience classes
# =============================================================================

class MerkleProver:
    """
    Convenience class for generating proofs.

    Example:
        >>> tree = build_merkle_tree([b"a", b"b", b"c", b"d"])
        >>> proof = MerkleProver.prove(tree, 1)
        >>> proof.leaf == tree[1]
        True
    """

    @staticmethod
    def prove(tree: MerkleTree, leaf_index: int) -> MerkleProof:
        """Generate a path proof; see build_merkle_proof()."""
        return build_merkle_proof(tree, leaf_index)

    @staticmethod
    def prove_detached(tree: MerkleTree, leaf_index: int) -> DetachedProof:
        """Generate a detached proof; see build_detached_proof()."""
        return build_detached_proof(tree, leaf_index)

    @staticmethod
    def compute_root(
        leaves: Sequence[Any],
        hash_fn: Hasher = SHA256,
        arity: int = 2,
        serializer: Callable[[Any], bytes] = serialize_element,
    ) -> bytes:
        """Compute the root digest for a sequence of leaf elements."""
        return MerkleTree(leaves, hash_fn=hash_fn, arity=arity, serializer=serializer).root()


class MerkleVerifier:
    """
    Convenience class for validating leaves and proofs.

    Example:
        >>> MerkleVerifier.validate(tree, 1, b"b")
        True
    """

    @staticmethod
    def validate(tree: MerkleTree, leaf_index: int, element: Any) -> bool:
        """Validate an element against a tree; see validate_merkle_proof()."""
        return validate_merkle_proof(tree, leaf_index, element)

    @staticmethod
    def verify_detached(
        proof: DetachedProof,
        element: Any,
        trusted_root: bytes,
        hash_fn: Hasher = SHA256,
        serializer: Callable[[Any], bytes] = serialize_element,
        leaf_count: int | None = None,
    ) -> bool:
        """Verify a detached proof; see verify_detached_proof()."""
        return verify_detached_proof(
            proof, element, trusted_root, hash_fn, serializer, leaf_count=leaf_count
        )

    @staticmethod
    def check(tree: MerkleTree, leaf_index: int, element: Any) -> VerificationResult:
        """
        Validate an element against a tree, reporting every step.

        Checks:
        - leaf_index_in_range: 0 <= leaf_index < leaf_count
        - leaf_hash_matches: the element hashes to the stored leaf digest
        - root_reachable: the leaf's parent chain ends at the root

        Errors raised while hashing the element (e.g. an unserializable
        type) are captured in the result instead of propagating.
        """
        result = VerificationResult.success()

        if (
            isinstance(leaf_index, bool)
            or not isinstance(leaf_index, int)
            or not 0 <= leaf_index < tree.leaf_count
        ):
            result.add_check(CheckResult.failed(
                "leaf_index_in_range",
                f"Leaf index {leaf_index!r} out of range for {tree.leaf_count} leaves",
                details={"code": ErrorCodes.INDEX_OUT_OF_RANGE, "leaf_count": tree.leaf_count},
            ))
            return result
        result.add_check(CheckResult.passed("leaf_index_in_range"))

        try:
            claimed = tree.hash_element(element)
        except MerkleException as e:
            return VerificationResult.failure(result.checks, error=e.to_error_model())

        stored = tree.digest(leaf_index)
        if claimed == stored:
            result.add_check(CheckResult.passed("leaf_hash_matches"))
        else:
            result.add_check(CheckResult.failed(
                "leaf_hash_matches",
                f"Claimed element does not match leaf {leaf_index}",
                details={
                    "code": ErrorCodes.LEAF_HASH_MISMATCH,
                    "expected": to_hex(stored),
                    "actual": to_hex(claimed),
                },
            ))

        path = tree.hash_path(leaf_index)
        if len(path) == tree.row_count and path[-1] == tree.root():
            result.add_check(CheckResult.passed("root_reachable"))
        else:
            result.add_check(CheckResult.failed(
                "root_reachable",
                f"Leaf {leaf_index} does not reach the root",
                details={"code": ErrorCodes.ROOT_MISMATCH},
            ))

        return result


__all__ = [
    "MerkleProof",
    "ProofStep",
    "DetachedProof",
    "build_merkle_proof",
    "validate_merkle_proof",
    "build_detached_proof",
    "verify_detached_proof",
    "MerkleProver",
    "MerkleVerifier",
]
