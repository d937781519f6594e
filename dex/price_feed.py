"""
dex/price_feed.py - Read-only normalized price per fee tier.
"""

from core.logging import get_logger
from core.math import normalize_sqrt_price_x96
from core.models import PoolHandle, Token
from dex.pool_locator import PoolLocator
from dex.venue import PoolRegistry, PriceOracle

logger = get_logger(__name__)


class PriceFeed:
    """
    Normalized spot price for a fixed token pair.

    Usage:
        feed = PriceFeed(registry, oracle, weth, usdc)
        price = await feed.get_price(500)
    """

    def __init__(
        self,
        registry: PoolRegistry,
        oracle: PriceOracle,
        token_a: Token,
        token_b: Token,
    ):
        self.locator = PoolLocator(registry)
        self.oracle = oracle
        self.token_a = token_a
        self.token_b = token_b

    async def resolve(self, fee_tier: int) -> PoolHandle:
        return await self.locator.resolve_pool(self.token_a, self.token_b, fee_tier)

    async def price_of(self, pool: PoolHandle) -> int:
        """normalize(current sqrtPriceX96) for an already-resolved pool."""
        raw = await self.oracle.get_sqrt_price_x96(pool)
        price = normalize_sqrt_price_x96(raw)
        logger.debug(
            "Pool priced",
            extra={"context": {
                "pool_address": pool.address,
                "fee_tier": pool.fee_tier,
                "sqrt_price_x96": raw,
                "price": price,
            }},
        )
        return price

    async def get_price(self, fee_tier: int) -> int:
        """
        Normalized price for the pool at fee_tier.

        Raises:
            ValidationError: fee_tier is not a uint24
            PoolNotFoundError: no pool deployed at that tier
        """
        pool = await self.resolve(fee_tier)
        return await self.price_of(pool)
