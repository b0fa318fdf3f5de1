"""
Module 01 - Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for tree construction and proofs.
Defines both a Pydantic model for structured error communication
and Python exceptions for control flow.

Every error here is a local precondition violation: none of them is
retryable, and none leaves a tree partially built.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction Errors
    INVALID_LEAF_COUNT = "INVALID_LEAF_COUNT"
    INVALID_ARITY = "INVALID_ARITY"
    DIGEST_SIZE_MISMATCH = "DIGEST_SIZE_MISMATCH"

    # Structural Query Errors
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    LEAF_HAS_NO_CHILDREN = "LEAF_HAS_NO_CHILDREN"
    ROOT_HAS_NO_PARENT = "ROOT_HAS_NO_PARENT"

    # Hashing & Serialization Errors
    UNKNOWN_HASH_ALGORITHM = "UNKNOWN_HASH_ALGORITHM"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Proof Outcomes (reported in results, never raised)
    ROOT_MISMATCH = "ROOT_MISMATCH"
    LEAF_HASH_MISMATCH = "LEAF_HASH_MISMATCH"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Error model for structured error communication.

    Used when an error has to be reported inside a result object
    (e.g. VerificationResult) instead of being raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_LEAF_COUNT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raised exception."""
        return MerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all nmerkle errors.

    Carries structured error information and can be converted
    to/from MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidLeafCountException(MerkleException, ValueError):
    """Raised when the leaf count cannot form a perfect tree of the given arity."""

    def __init__(
        self,
        message: str,
        leaf_count: int | None = None,
        arity: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_count is not None:
            full_details["leaf_count"] = leaf_count
        if arity is not None:
            full_details["arity"] = arity
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_LEAF_COUNT,
            details=full_details,
            retryable=False,
        )


class InvalidArityException(MerkleException, ValueError):
    """Raised when the branching factor is below 2."""

    def __init__(
        self,
        message: str,
        arity: int | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_ARITY,
            details={"arity": arity} if arity is not None else {},
            retryable=False,
        )


class DigestSizeMismatchException(MerkleException, ValueError):
    """Raised when a hash function returns a digest of unexpected length."""

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        full_details: dict[str, Any] = {}
        if expected is not None:
            full_details["expected"] = expected
        if actual is not None:
            full_details["actual"] = actual
        super().__init__(
            message=message,
            code=ErrorCodes.DIGEST_SIZE_MISMATCH,
            details=full_details,
            retryable=False,
        )


class IndexOutOfRangeException(MerkleException, IndexError):
    """Raised when a leaf or node index falls outside the tree."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        limit: int | None = None,
    ) -> None:
        full_details: dict[str, Any] = {}
        if index is not None:
            full_details["index"] = index
        if limit is not None:
            full_details["limit"] = limit
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )


class LeafHasNoChildrenException(MerkleException):
    """Raised when children() is called on a row-0 node."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_HAS_NO_CHILDREN,
            details={"index": index} if index is not None else {},
            retryable=False,
        )


class RootHasNoParentException(MerkleException):
    """Raised when parent() is called on the root node."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ROOT_HAS_NO_PARENT,
            details={"index": index} if index is not None else {},
            retryable=False,
        )


class UnknownHashAlgorithmException(MerkleException, ValueError):
    """Raised when a hash algorithm name is not registered."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        full_details: dict[str, Any] = {}
        if name:
            full_details["name"] = name
        if available:
            full_details["available"] = available
        super().__init__(
            message=message,
            code=ErrorCodes.UNKNOWN_HASH_ALGORITHM,
            details=full_details,
            retryable=False,
        )


class CanonicalizationException(MerkleException):
    """Exception raised when an element cannot be serialized to bytes."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )
