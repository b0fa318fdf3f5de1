"""
Core cryptographic utilities.

Module 02 provides the hash function capability consumed by the tree.
"""
from .hashing import (
    Hasher,
    HashFunction,
    SHA256,
    available_hash_functions,
    get_hash_function,
    sha256,
    hash_element,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "Hasher",
    "HashFunction",
    "SHA256",
    "available_hash_functions",
    "get_hash_function",
    "sha256",
    "hash_element",
    "hash_concat",
    "to_hex",
    "from_hex",
]
