"""
strategy/decider.py - Direction choice between two fee tiers.

DECISION CONTRACT:
==================
  price_a < price_b  ->  BUY_A_SELL_B   (leg 1 through A, leg 2 through B)
  price_a > price_b  ->  BUY_B_SELL_A   (leg 1 through B, leg 2 through A)
  price_a == price_b ->  NO_OPPORTUNITY

Strict inequality, no profitability margin. Fees and price impact are
NOT considered, so a nominal 1-wei difference is still traded and the
cycle can finish with amount_out < amount_in. Profit is only known
after both legs fill.
==================
"""

from core.constants import Direction
from core.math import calculate_bps_diff, require_non_negative_int
from core.models import PoolHandle, Route


class ArbitrageDecider:
    """Pure direction-only decision over two normalized prices."""

    def decide(self, price_a: int, price_b: int) -> Direction:
        require_non_negative_int(price_a, "price_a")
        require_non_negative_int(price_b, "price_b")

        if price_a < price_b:
            return Direction.BUY_A_SELL_B
        if price_a > price_b:
            return Direction.BUY_B_SELL_A
        return Direction.NO_OPPORTUNITY

    def route(self, direction: Direction, pool_a: PoolHandle, pool_b: PoolHandle) -> Route | None:
        """Map a direction onto concrete buy/sell pools (None for no opportunity)."""
        if direction == Direction.BUY_A_SELL_B:
            return Route(direction=direction, buy_pool=pool_a, sell_pool=pool_b)
        if direction == Direction.BUY_B_SELL_A:
            return Route(direction=direction, buy_pool=pool_b, sell_pool=pool_a)
        return None


def spread_bps(price_a: int, price_b: int) -> int:
    """
    Spread of the higher price over the lower, in integer bps.

    Informational only; never part of the decision.
    """
    low, high = sorted((price_a, price_b))
    return calculate_bps_diff(high, low)
