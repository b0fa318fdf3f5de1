"""
nmerkle - fixed-arity Merkle trees with inclusion proofs.

Usage:
    from nmerkle import build_merkle_tree, build_merkle_proof, get_hash_function

    tree = build_merkle_tree(["0", "1", "2", "3"], get_hash_function("md5"))
    proof = build_merkle_proof(tree, 0)
    proof.validate("0")
"""

from nmerkle.crypto.hashing import HashFunction, get_hash_function
from nmerkle.merkle import (
    DetachedProof,
    MerkleProof,
    MerkleProver,
    MerkleTree,
    MerkleVerifier,
    build_detached_proof,
    build_merkle_proof,
    build_merkle_root,
    build_merkle_tree,
    validate_merkle_proof,
    verify_detached_proof,
)

__version__ = "0.1.0"

__all__ = [
    "HashFunction",
    "get_hash_function",
    "DetachedProof",
    "MerkleProof",
    "MerkleProver",
    "MerkleTree",
    "MerkleVerifier",
    "build_detached_proof",
    "build_merkle_proof",
    "build_merkle_root",
    "build_merkle_tree",
    "validate_merkle_proof",
    "verify_detached_proof",
]
