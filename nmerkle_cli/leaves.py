"""
Leaf input handling shared by the tree and proof commands.

Leaves come from positional arguments and/or a file with one leaf per
line. Each leaf is either UTF-8 text or a hex string (optionally 0x
prefixed), depending on the configured leaf encoding.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from nmerkle.config.runtime import RuntimeConfig
from nmerkle.crypto.hashing import get_hash_function
from nmerkle.merkle.merkle_tree import MerkleTree


logger = logging.getLogger(__name__)


def add_tree_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the options every tree-building command accepts."""
    parser.add_argument(
        "leaves",
        nargs="*",
        help="Leaf values in order",
    )
    parser.add_argument(
        "--file", "-f",
        type=str,
        default=None,
        help="Read additional leaves from a file, one per line",
    )
    parser.add_argument(
        "--arity", "-a",
        type=int,
        default=None,
        help="Branching factor (default: from config, 2)",
    )
    parser.add_argument(
        "--hash",
        dest="hash_algorithm",
        type=str,
        default=None,
        help="Hash algorithm (default: from config, sha256)",
    )
    parser.add_argument(
        "--hex",
        action="store_true",
        default=False,
        help="Interpret leaves as hex-encoded bytes",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Show tracebacks on error",
    )


def leaf_encoding(args: argparse.Namespace, config: RuntimeConfig) -> str:
    return "hex" if getattr(args, "hex", False) else config.tree.leaf_encoding


def decode_leaf(value: str, encoding: str) -> Any:
    """Turn a command-line leaf into the element that gets hashed."""
    if encoding == "hex":
        text = value[2:] if value.startswith(("0x", "0X")) else value
        return bytes.fromhex(text)
    return value


def read_leaves(args: argparse.Namespace, config: RuntimeConfig) -> list[Any]:
    """Collect leaves from positional arguments then from --file."""
    raw: list[str] = list(args.leaves or [])

    if args.file:
        path = Path(args.file)
        logger.info(f"Reading leaves from {path}")
        raw.extend(line for line in path.read_text().splitlines() if line)

    encoding = leaf_encoding(args, config)
    return [decode_leaf(value, encoding) for value in raw]


def build_tree(args: argparse.Namespace, config: RuntimeConfig) -> MerkleTree:
    """Build a tree from the command's leaves and options."""
    leaves = read_leaves(args, config)
    arity = args.arity if args.arity is not None else config.tree.arity
    hash_fn = get_hash_function(args.hash_algorithm or config.tree.hash_algorithm)

    logger.info(f"Building tree: {len(leaves)} leaves, arity={arity}, hash={hash_fn.name}")
    return MerkleTree(leaves, hash_fn=hash_fn, arity=arity)
