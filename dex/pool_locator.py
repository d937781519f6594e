"""
dex/pool_locator.py - Resolve fee tiers to pool handles.

Lookups always hit the venue registry: pools can be deployed between
calls, so nothing is cached.
"""

from core.constants import ZERO_ADDRESS
from core.exceptions import PoolNotFoundError
from core.logging import get_logger
from core.models import PoolHandle, Token
from core.validators import same_address, validate_fee_tier
from dex.venue import PoolRegistry

logger = get_logger(__name__)


class PoolLocator:
    """Fee tier -> PoolHandle via the venue's pool registry."""

    def __init__(self, registry: PoolRegistry):
        self.registry = registry

    async def resolve_pool(
        self,
        token_a: Token,
        token_b: Token,
        fee_tier: int,
    ) -> PoolHandle:
        """
        Resolve the pool for (token_a, token_b, fee_tier).

        Raises:
            ValidationError: fee_tier is not a uint24
            PoolNotFoundError: the venue has no pool for the triple
        """
        validate_fee_tier(fee_tier)
        pool = await self.registry.get_pool(token_a, token_b, fee_tier)

        if pool is None or same_address(pool.address, ZERO_ADDRESS):
            logger.debug(
                "Pool not found",
                extra={"context": {
                    "token_a": token_a.address,
                    "token_b": token_b.address,
                    "fee_tier": fee_tier,
                }},
            )
            raise PoolNotFoundError(
                f"No pool for {token_a}/{token_b} at fee tier {fee_tier}",
                details={
                    "token_a": token_a.address,
                    "token_b": token_b.address,
                    "fee_tier": fee_tier,
                },
            )

        logger.debug(
            "Pool resolved",
            extra={"context": {"pool_address": pool.address, "fee_tier": fee_tier}},
        )
        return pool
