"""
Runtime Configuration

Central configuration for tree construction defaults and logging.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


# Leaf encodings understood by the CLI: "utf-8" text or "hex" bytes
LEAF_ENCODINGS = ("utf-8", "hex")


@dataclass
class TreeConfig:
    """Defaults used when building trees."""
    arity: int = 2
    hash_algorithm: str = "sha256"
    leaf_encoding: str = "utf-8"

    def __post_init__(self):
        if self.leaf_encoding not in LEAF_ENCODINGS:
            raise ValueError(
                f"leaf_encoding must be one of {LEAF_ENCODINGS}, got {self.leaf_encoding!r}"
            )


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - JSON or YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - NMERKLE_ARITY: Default branching factor
        - NMERKLE_HASH_ALGORITHM: Default hash algorithm name
        - NMERKLE_LEAF_ENCODING: How CLI leaves are decoded (utf-8 or hex)
        - NMERKLE_LOG_LEVEL: Log level
        - NMERKLE_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv("NMERKLE_ARITY"):
            overrides.setdefault("tree", {})["arity"] = int(os.getenv("NMERKLE_ARITY", "2"))
        if os.getenv("NMERKLE_HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv("NMERKLE_HASH_ALGORITHM")
        if os.getenv("NMERKLE_LEAF_ENCODING"):
            overrides.setdefault("tree", {})["leaf_encoding"] = os.getenv("NMERKLE_LEAF_ENCODING")

        if os.getenv("NMERKLE_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("NMERKLE_LOG_LEVEL")
        if os.getenv("NMERKLE_LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv("NMERKLE_LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load from a .yaml/.yml or JSON file, chosen by extension."""
        if Path(path).suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        logging_data = data.get("logging", {})

        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()
        log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        return cls(
            tree=tree,
            logging=log,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            for key, value in overrides["tree"].items():
                setattr(new_config.tree, key, value)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "arity": self.tree.arity,
                "hash_algorithm": self.tree.hash_algorithm,
                "leaf_encoding": self.tree.leaf_encoding,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config
