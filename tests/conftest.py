"""
Pytest configuration and shared fixtures for distributor tests.

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

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_chain = _common.make_chain
make_token = _common.make_token
make_falsy_token = _common.make_falsy_token
make_two_leaf_tree = _common.make_two_leaf_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def chain():
    """Provide a fresh Chain with ten accounts."""
    return make_chain()


@pytest.fixture
def wallets(chain):
    """Provide the chain's accounts."""
    return chain.accounts


@pytest.fixture
def wallet0(wallets):
    """Provide the default sender account."""
    return wallets[0]


@pytest.fixture
def wallet1(wallets):
    """Provide a second account."""
    return wallets[1]


@pytest.fixture
def token(chain):
    """Provide a TestERC20 with no initial supply."""
    return make_token(chain)


@pytest.fixture
def token2(chain):
    """Provide a second, independent TestERC20."""
    return make_token(chain, "Token2", "TKN2")


@pytest.fixture
def falsy_token(chain):
    """Provide a token whose transfer returns False."""
    return make_falsy_token(chain)


@pytest.fixture
def two_leaf_tree(wallet0, wallet1):
    """Provide BalanceTree{wallet0: 100, wallet1: 101}."""
    return make_two_leaf_tree(wallet0, wallet1)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DISTRIBUTOR_* variables so config tests see only defaults."""
    for name in [
        "DISTRIBUTOR_IDENTIFIER_KIND",
        "DISTRIBUTOR_HASH_KEYS",
        "DISTRIBUTOR_JSON_INDENT",
        "DISTRIBUTOR_LOG_LEVEL",
        "DISTRIBUTOR_LOG_FILE",
    ]:
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
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
