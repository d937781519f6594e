"""
Pytest configuration and fixtures for TIERARB tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.math import human_price_to_sqrt_price_x96, human_to_wei  # noqa: E402
from core.models import ArbitrageConfig, Token  # noqa: E402
from dex.adapters.paper import PaperVenue  # noqa: E402
from execution.engine import ArbitrageEngine  # noqa: E402

CONTROLLER = "0x" + "c0" * 20
HOLDER = "0x" + "ab" * 20
STRANGER = "0x" + "de" * 20
SWAP_ROUTER = "0xE592427A0AEce92De3Edee1F18E0157C05861564"
POOL_REGISTRY = "0x1F98431c8aD98523631AE4a59f267346ea31F984"

FEE_TIER_A = 500
FEE_TIER_B = 3000


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture
def token_x():
    """token0 (lower address)."""
    return Token(address="0x" + "0" * 38 + "a1", symbol="XTK", decimals=18)


@pytest.fixture
def token_y():
    """token1 (higher address)."""
    return Token(address="0x" + "0" * 38 + "b2", symbol="YTK", decimals=18)


@pytest.fixture
def config(token_x, token_y):
    """Spend YTK on leg 1, hold XTK in between."""
    return ArbitrageConfig(
        token_in=token_y,
        token_out=token_x,
        fee_tier_a=FEE_TIER_A,
        fee_tier_b=FEE_TIER_B,
        controller=CONTROLLER,
        swap_router=SWAP_ROUTER,
        pool_registry=POOL_REGISTRY,
        chain_id=42161,
    )


@pytest.fixture
def venue(config):
    """Paper venue holding 1,000,000 YTK, no pools."""
    paper = PaperVenue(holder=HOLDER)
    paper.mint(config.token_in, HOLDER, human_to_wei("1000000", 18))
    return paper


@pytest.fixture
def make_engine(config, venue):
    """
    Factory: deploy pools at the given human prices and build an engine.

    A price of None leaves that tier undeployed.
    """
    def _make(price_a="12500", price_b="8800"):
        if price_a is not None:
            venue.create_pool(
                config.token_in, config.token_out, config.fee_tier_a,
                sqrt_price_x96=human_price_to_sqrt_price_x96(price_a),
            )
        if price_b is not None:
            venue.create_pool(
                config.token_in, config.token_out, config.fee_tier_b,
                sqrt_price_x96=human_price_to_sqrt_price_x96(price_b),
            )
        return ArbitrageEngine(config, venue)

    return _make


@pytest.fixture
def controller():
    return CONTROLLER


@pytest.fixture
def stranger():
    return STRANGER


@pytest.fixture
def holder():
    return HOLDER
