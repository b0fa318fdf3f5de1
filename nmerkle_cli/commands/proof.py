"""
Module 05 - CLI Proof Commands

Generate and validate inclusion proofs for a leaf:
- prove: print the hash path (or a detached sibling proof)
- validate: check a claimed value against a leaf of the tree

Usage:
    nmerkle prove 0 0 1 2 3 4 5 6 7 [--detached] [--json]
    nmerkle validate 0 "0" 0 1 2 3 4 5 6 7 [--detached] [--json]

validate exits with 2 when the claimed value is rejected.
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from typing import Any

from nmerkle.merkle.merkle_proofs import (
    MerkleVerifier,
    build_detached_proof,
    build_merkle_proof,
    verify_detached_proof,
)
from nmerkle_cli.leaves import build_tree, decode_leaf, leaf_encoding


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class ValidateSummary:
    """Summary of a leaf validation for CLI output."""
    leaf_index: int = 0
    mode: str = "path"
    root: str = ""
    valid: bool = False
    checks: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["checks"]:
            del d["checks"]
        return d


def prove_cmd(args: Namespace) -> int:
    """Execute the prove command."""
    tree = build_tree(args, args.cli_config)

    if args.detached:
        detached = build_detached_proof(tree, args.index)
        data = detached.to_dict()
        data["root"] = tree.root().hex()
        if args.json:
            print(json.dumps(data, indent=2))
        else:
            print(f"leaf {detached.leaf_index} (arity {detached.arity}), root {data['root']}")
            for row, step in enumerate(data["steps"]):
                print(f"  row {row}: position={step['position']} siblings={', '.join(step['siblings'])}")
        return EXIT_SUCCESS

    proof = build_merkle_proof(tree, args.index)
    path = [digest.hex() for digest in proof.path]
    if args.json:
        print(json.dumps({"leaf_index": proof.leaf_index, "path": path}, indent=2))
    else:
        for digest in path:
            print(digest)
    return EXIT_SUCCESS


def validate_cmd(args: Namespace) -> int:
    """Execute the validate command."""
    config = args.cli_config
    tree = build_tree(args, config)
    claim = decode_leaf(args.claim, leaf_encoding(args, config))

    summary = ValidateSummary(leaf_index=args.index, root=tree.root().hex())

    if args.detached:
        summary.mode = "detached"
        proof = build_detached_proof(tree, args.index)
        summary.valid = verify_detached_proof(
            proof, claim, tree.root(), tree.hash_fn, tree.serializer,
            leaf_count=tree.leaf_count,
        )
    else:
        result = MerkleVerifier.check(tree, args.index, claim)
        summary.valid = result.ok
        checks = result.checks if args.debug or args.json else result.get_failed_checks()
        summary.checks = [check.model_dump() for check in checks]

    if summary.valid:
        logger.info("Validation passed")
    else:
        logger.warning("Validation failed")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        status = "VALID" if summary.valid else "INVALID"
        print(f"{status}: leaf {summary.leaf_index} ({summary.mode} proof), root {summary.root}")
        for check in summary.checks:
            marker = "ok" if check["ok"] else "FAIL"
            print(f"  [{marker}] {check['check_id']}: {check['message']}")

    return EXIT_SUCCESS if summary.valid else EXIT_VERIFICATION_FAILED
