"""
Pytest configuration and shared fixtures for nmerkle tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_trees = importlib.import_module("fixtures.trees")

make_digit_leaves = _trees.make_digit_leaves
make_tree = _trees.make_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def binary_leaves():
    """Leaves '0'..'7' for an arity-2 tree."""
    return make_digit_leaves(8)


@pytest.fixture
def ternary_leaves():
    """Leaves '0'..'8' for an arity-3 tree."""
    return make_digit_leaves(9)


@pytest.fixture
def binary_tree(binary_leaves):
    """SHA-256, arity 2, 8 leaves."""
    return make_tree(leaves=binary_leaves, arity=2)


@pytest.fixture
def ternary_tree(ternary_leaves):
    """SHA-256, arity 3, 9 leaves."""
    return make_tree(leaves=ternary_leaves, arity=3)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove NMERKLE_* variables so config tests start from defaults."""
    for name in (
        "NMERKLE_ARITY",
        "NMERKLE_HASH_ALGORITHM",
        "NMERKLE_LEAF_ENCODING",
        "NMERKLE_LOG_LEVEL",
        "NMERKLE_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
