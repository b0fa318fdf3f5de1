"""
Module 05 - CLI Configuration

Resolves the runtime configuration for the CLI from a config file and
environment variables.
"""

from __future__ import annotations

from pathlib import Path

from nmerkle.config.runtime import RuntimeConfig


# Searched in order when no --config is given
DEFAULT_CONFIG_PATHS = (
    Path("nmerkle.json"),
    Path(".nmerkle.json"),
    Path("nmerkle.yaml"),
)
USER_CONFIG_PATH = Path.home() / ".config" / "nmerkle" / "config.json"


def find_config_file() -> Path | None:
    """Return the first default config file that exists, if any."""
    for candidate in DEFAULT_CONFIG_PATHS:
        path = Path.cwd() / candidate
        if path.exists():
            return path
    if USER_CONFIG_PATH.exists():
        return USER_CONFIG_PATH
    return None


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional explicit path to a JSON or YAML config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        found = find_config_file()
        config = RuntimeConfig.from_file(found) if found else RuntimeConfig()

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "tree": {
    "arity": 2,
    "hash_algorithm": "sha256",
    "leaf_encoding": "utf-8"
  },
  "logging": {
    "level": "INFO",
    "file": null
  }
}
"""
