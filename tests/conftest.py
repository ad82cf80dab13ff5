"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.api.mock_source import create_sample_prices, create_sample_transfers  # noqa: E402


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )


@pytest.fixture
def sample_prices():
    """SOL, BTC and ETH two-venue quotes."""
    return create_sample_prices()


@pytest.fixture
def sample_transfers():
    """Three pending transfers; only tx3 clears the default sandwich filters."""
    return create_sample_transfers()
