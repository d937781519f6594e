"""
dex/ - Venue boundary.

- venue: protocols for the external exchange venue
- pool_locator: fee tier -> PoolHandle
- price_feed: normalized price per fee tier
- adapters: concrete venues (paper, Uniswap V3 read-only)
"""

from dex.pool_locator import PoolLocator
from dex.price_feed import PriceFeed
from dex.venue import (
    BalanceProvider,
    ExchangeVenue,
    PoolRegistry,
    PriceOracle,
    SwapRouter,
)

__all__ = [
    "PoolLocator",
    "PriceFeed",
    "BalanceProvider",
    "ExchangeVenue",
    "PoolRegistry",
    "PriceOracle",
    "SwapRouter",
]
