"""
Module 01 - Schemas & Errors
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    ensure_utc,
    format_datetime_canonical,
    serialize_element,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    DigestSizeMismatchException,
    ErrorCodes,
    IndexOutOfRangeException,
    InvalidArityException,
    InvalidLeafCountException,
    LeafHasNoChildrenException,
    MerkleError,
    MerkleException,
    RootHasNoParentException,
    UnknownHashAlgorithmException,
)

# Verification results
from .verification import (
    CheckResult,
    VerificationResult,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "ensure_utc",
    "format_datetime_canonical",
    "serialize_element",
    # Errors
    "CanonicalizationException",
    "DigestSizeMismatchException",
    "ErrorCodes",
    "IndexOutOfRangeException",
    "InvalidArityException",
    "InvalidLeafCountException",
    "LeafHasNoChildrenException",
    "MerkleError",
    "MerkleException",
    "RootHasNoParentException",
    "UnknownHashAlgorithmException",
    # Verification
    "CheckResult",
    "VerificationResult",
]
