"""
Module 05 - CLI Tree Commands

Build a tree from leaves and report on it:
- root: print the root digest
- inspect: dump every node with its children
- hashes: list registered hash algorithms

Usage:
    nmerkle root 0 1 2 3 4 5 6 7 [--hash sha256] [--arity 2] [--json]
    nmerkle inspect 0 1 2 3 4 5 6 7 8 --arity 3
    nmerkle hashes [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import dataclass, asdict
from typing import Any

from nmerkle.crypto.hashing import available_hash_functions, get_hash_function
from nmerkle.merkle.merkle_tree import MerkleTree
from nmerkle_cli.leaves import build_tree


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class TreeSummary:
    """Summary of a built tree for CLI output."""
    hash_algorithm: str = ""
    arity: int = 0
    leaf_count: int = 0
    row_count: int = 0
    node_count: int = 0
    root: str = ""

    @classmethod
    def from_tree(cls, tree: MerkleTree) -> "TreeSummary":
        return cls(
            hash_algorithm=getattr(tree.hash_fn, "name", "custom"),
            arity=tree.arity,
            leaf_count=tree.leaf_count,
            row_count=tree.row_count,
            node_count=len(tree),
            root=tree.root().hex(),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def root_cmd(args: Namespace) -> int:
    """Execute the root command."""
    tree = build_tree(args, args.cli_config)
    summary = TreeSummary.from_tree(tree)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(summary.root)

    return EXIT_SUCCESS


def inspect_cmd(args: Namespace) -> int:
    """Execute the inspect command."""
    tree = build_tree(args, args.cli_config)
    summary = TreeSummary.from_tree(tree)

    if args.json:
        data = summary.to_dict()
        data["rows"] = [
            [digest.hex() for digest in tree.row(row)]
            for row in range(tree.row_count)
        ]
        print(json.dumps(data, indent=2))
        return EXIT_SUCCESS

    print(
        f"hash={summary.hash_algorithm} arity={summary.arity} "
        f"leaves={summary.leaf_count} rows={summary.row_count} nodes={summary.node_count}"
    )
    print(tree.render())
    return EXIT_SUCCESS


def hashes_cmd(args: Namespace) -> int:
    """Execute the hashes command."""
    names = available_hash_functions()

    if args.json:
        data = [
            {"name": name, "digest_size": get_hash_function(name).digest_size}
            for name in names
        ]
        print(json.dumps(data, indent=2))
        return EXIT_SUCCESS

    for name in names:
        print(f"  - {name} ({get_hash_function(name).digest_size} bytes)")
    return EXIT_SUCCESS
