"""
Module 01 - Schemas & Errors
File: verification.py

Purpose: Step-by-step outcome of validating a claimed leaf.

MerkleVerifier.check() runs three checks against a built tree
(leaf_index_in_range, leaf_hash_matches, root_reachable) and records
each one here instead of collapsing them into a bare boolean. The CLI
prints the failed checks, or all of them with --debug/--json.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import MerkleError


class CheckResult(BaseModel):
    """Outcome of one leaf-validation check."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Name of the check, e.g. leaf_hash_matches",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the tree satisfied the check",
    )
    message: str = Field(
        ...,
        description="Human-readable outcome",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Error code plus expected/actual digests (hex) on failure",
    )

    @classmethod
    def passed(cls, check_id: str, message: str = "Check passed") -> "CheckResult":
        return cls(check_id=check_id, ok=True, message=message)

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, message=message, details=details or {})


class VerificationResult(BaseModel):
    """
    All checks run for one claimed leaf.

    `ok` turns False as soon as a failed check is added. An exception
    raised while hashing the claimed element ends the run early and is
    kept in `error`.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(
        ...,
        description="True only if every check passed and no error occurred",
    )
    checks: list[CheckResult] = Field(
        default_factory=list,
        description="Checks in the order they ran",
    )
    error: MerkleError | None = Field(
        default=None,
        description="Error that stopped validation, if any",
    )

    @classmethod
    def success(cls) -> "VerificationResult":
        """Start a run with no checks yet."""
        return cls(ok=True)

    @classmethod
    def failure(
        cls,
        checks: list[CheckResult],
        error: MerkleError | None = None,
    ) -> "VerificationResult":
        return cls(ok=False, checks=checks, error=error)

    def add_check(self, check: CheckResult) -> None:
        self.checks.append(check)
        if not check.ok:
            self.ok = False

    def get_failed_checks(self) -> list[CheckResult]:
        return [check for check in self.checks if not check.ok]
