"""
Runtime Configuration Module

Provides configuration loading and management for nmerkle.
"""

from .runtime import (
    LEAF_ENCODINGS,
    LoggingConfig,
    RuntimeConfig,
    TreeConfig,
    get_default_config,
)

__all__ = [
    "LEAF_ENCODINGS",
    "LoggingConfig",
    "RuntimeConfig",
    "TreeConfig",
    "get_default_config",
]
