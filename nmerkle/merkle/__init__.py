"""
Modules 03/04 - Merkle Tree and Proofs
Deterministic n-ary Merkle tree construction + proof generation/validation.

This package provides:
- MerkleTree / build_merkle_tree: Build an immutable tree from leaf elements
- build_merkle_proof / validate_merkle_proof: Path proofs against a built tree
- build_detached_proof / verify_detached_proof: Sibling proofs checked
  against a trusted root without the tree
- Shape arithmetic helpers (row sizes, row count, total node count)

Commitment Rules:
1. Leaf hashing: H(serialize(element))
2. Parent hashing: H(child_0 + ... + child_{arity-1}), left to right
3. No padding: leaf count must be a positive power of arity

Usage:
    from nmerkle.merkle import build_merkle_tree, build_merkle_proof, validate_merkle_proof
    from nmerkle.crypto import get_hash_function

    tree = build_merkle_tree([b"0", b"1", b"2", b"3"], get_hash_function("sha256"), arity=2)
    root = tree.root()

    proof = build_merkle_proof(tree, 2)
    assert proof.validate(b"2", tree)
    assert validate_merkle_proof(tree, 2, b"2")
"""
from .utilities import (
    check_arity,
    compute_row_sizes,
    compute_row_starts,
    compute_row_count,
    compute_tree_len,
    is_valid_leaf_count,
)

from .merkle_tree import (
    MerkleTree,
    merkle_parent,
    build_merkle_tree,
    build_merkle_root,
)

from .merkle_proofs import (
    MerkleProof,
    ProofStep,
    DetachedProof,
    build_merkle_proof,
    validate_merkle_proof,
    build_detached_proof,
    verify_detached_proof,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Shape arithmetic
    "check_arity",
    "compute_row_sizes",
    "compute_row_starts",
    "compute_row_count",
    "compute_tree_len",
    "is_valid_leaf_count",
    # Tree
    "MerkleTree",
    "merkle_parent",
    "build_merkle_tree",
    "build_merkle_root",
    # Proofs
    "MerkleProof",
    "ProofStep",
    "DetachedProof",
    "build_merkle_proof",
    "validate_merkle_proof",
    "build_detached_proof",
    "verify_detached_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
