"""
Module 05 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m nmerkle_cli root LEAF... [--arity N] [--hash NAME] [--hex] [--json]
    python -m nmerkle_cli inspect LEAF... [--arity N] [--hash NAME]
    python -m nmerkle_cli prove INDEX LEAF... [--detached] [--json]
    python -m nmerkle_cli validate INDEX CLAIM LEAF... [--detached] [--json]
    python -m nmerkle_cli hashes [--json]
    python -m nmerkle_cli config --init|--show

Environment Variables:
    NMERKLE_ARITY               Default branching factor (default: 2)
    NMERKLE_HASH_ALGORITHM      Default hash algorithm (default: sha256)
    NMERKLE_LEAF_ENCODING       Leaf encoding: utf-8 or hex (default: utf-8)
    NMERKLE_LOG_LEVEL           Log level (default: INFO)
    NMERKLE_LOG_FILE            Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from nmerkle_cli import __version__
from nmerkle_cli.commands import proof, tree
from nmerkle_cli.config import load_config, get_default_config_template
from nmerkle_cli.leaves import add_tree_arguments


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="nmerkle",
        description="nmerkle CLI - Build fixed-arity Merkle trees, produce and validate inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./nmerkle.json or ~/.config/nmerkle/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the root digest of a tree",
        description="Build a tree from the given leaves and print its root digest.",
    )
    add_tree_arguments(root_parser)
    root_parser.set_defaults(func=tree.root_cmd)

    # --- inspect command ---
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Dump every node of a tree",
        description="Build a tree and list each node with its digest and children.",
    )
    add_tree_arguments(inspect_parser)
    inspect_parser.set_defaults(func=tree.inspect_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Print the inclusion proof for a leaf",
        description="Build a tree and print the hash path (or detached proof) of one leaf.",
    )
    prove_parser.add_argument("index", type=int, help="Leaf index to prove")
    add_tree_arguments(prove_parser)
    prove_parser.add_argument(
        "--detached",
        action="store_true",
        default=False,
        help="Print sibling digests instead of the hash path",
    )
    prove_parser.set_defaults(func=proof.prove_cmd)

    # --- validate command ---
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a claimed value for a leaf",
        description="Build a tree and check whether CLAIM is the value at leaf INDEX.",
    )
    validate_parser.add_argument("index", type=int, help="Leaf index to validate")
    validate_parser.add_argument("claim", type=str, help="Claimed leaf value")
    add_tree_arguments(validate_parser)
    validate_parser.add_argument(
        "--detached",
        action="store_true",
        default=False,
        help="Recompute the root from sibling digests instead of trusting the tree",
    )
    validate_parser.set_defaults(func=proof.validate_cmd)

    # --- hashes command ---
    hashes_parser = subparsers.add_parser(
        "hashes",
        help="List registered hash algorithms",
    )
    hashes_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    hashes_parser.set_defaults(func=tree.hashes_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="nmerkle.json",
        help="Path for config file (default: nmerkle.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (NMERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: nmerkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=validation failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
