"""
tests/unit/test_swap_executor.py - Two-leg swap pipeline.
"""

import pytest
from unittest.mock import AsyncMock

from core.constants import DeclineReason, Direction, Q96, SwapLeg
from core.exceptions import ErrorCode, ValidationError, VenueSwapError
from core.models import Route, Token
from dex.adapters.paper import PaperVenue
from execution.swap_executor import SwapExecutor

HOLDER = "0x" + "ab" * 20
ONE = 10**18


@pytest.fixture
def x():
    return Token(address="0x" + "0" * 38 + "a1", symbol="XTK")


@pytest.fixture
def y():
    return Token(address="0x" + "0" * 38 + "b2", symbol="YTK")


@pytest.fixture
def venue(x, y):
    paper = PaperVenue(holder=HOLDER)
    paper.mint(y, HOLDER, 1_000 * ONE)
    paper.create_pool(x, y, 500, sqrt_price_x96=2 * Q96)   # 4 YTK / XTK
    paper.create_pool(x, y, 3000, sqrt_price_x96=3 * Q96)  # 9 YTK / XTK
    return paper


def _route(venue, x, y):
    pool_a = venue.pool_state(x, y, 500).handle
    pool_b = venue.pool_state(x, y, 3000).handle
    return Route(direction=Direction.BUY_A_SELL_B, buy_pool=pool_a, sell_pool=pool_b)


class TestSwapExecutor:

    @pytest.mark.asyncio
    async def test_two_legs_chain(self, venue, x, y):
        executor = SwapExecutor(venue, token_in=y, token_out=x)
        result = await executor.execute(_route(venue, x, y), 40 * ONE)

        assert result.is_executed
        assert result.buy_leg.leg == SwapLeg.BUY
        assert result.buy_leg.pool.fee_tier == 500
        assert result.buy_leg.token_in == y
        assert result.sell_leg.pool.fee_tier == 3000
        assert result.sell_leg.amount_in == result.buy_leg.amount_out
        assert result.sell_leg.token_out == y
        assert result.amount_out == result.sell_leg.amount_out

        # Holdings moved by exactly the two fills
        assert await venue.balance_of(y) == 1_000 * ONE - 40 * ONE + result.amount_out
        assert await venue.balance_of(x) == 0

    @pytest.mark.asyncio
    async def test_insufficient_balance_declines(self, venue, x, y):
        executor = SwapExecutor(venue, token_in=y, token_out=x)
        result = await executor.execute(_route(venue, x, y), 1_001 * ONE)

        assert not result.is_executed
        assert result.amount_out == 0
        assert result.decline_reason == DeclineReason.INSUFFICIENT_BALANCE
        assert venue.swap_calls == []

    @pytest.mark.asyncio
    async def test_exact_balance_proceeds(self, venue, x, y):
        executor = SwapExecutor(venue, token_in=y, token_out=x)
        result = await executor.execute(_route(venue, x, y), 1_000 * ONE)
        assert result.is_executed

    @pytest.mark.asyncio
    async def test_zero_amount(self, venue, x, y):
        executor = SwapExecutor(venue, token_in=y, token_out=x)
        result = await executor.execute(_route(venue, x, y), 0)
        assert result.is_executed
        assert result.amount_out == 0

    @pytest.mark.asyncio
    async def test_sell_leg_failure_rolls_back(self, venue, x, y):
        venue.set_failing(x, y, 3000)
        executor = SwapExecutor(venue, token_in=y, token_out=x)

        with pytest.raises(VenueSwapError) as exc_info:
            await executor.execute(_route(venue, x, y), 40 * ONE)

        assert exc_info.value.code == ErrorCode.VENUE_SWAP_FAILED
        assert exc_info.value.details["leg"] == "SELL"
        assert await venue.balance_of(y) == 1_000 * ONE
        assert await venue.balance_of(x) == 0
        assert [c.ok for c in venue.swap_calls] == [True, False]

    @pytest.mark.asyncio
    async def test_unexpected_venue_error_wrapped(self, venue, x, y):
        venue.swap_exact_input = AsyncMock(side_effect=RuntimeError("rpc dropped"))
        executor = SwapExecutor(venue, token_in=y, token_out=x)

        with pytest.raises(VenueSwapError) as exc_info:
            await executor.execute(_route(venue, x, y), ONE)
        assert exc_info.value.details["leg"] == "BUY"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_invalid_amount_out_rejected(self, venue, x, y):
        venue.swap_exact_input = AsyncMock(return_value=-5)
        executor = SwapExecutor(venue, token_in=y, token_out=x)
        with pytest.raises(VenueSwapError):
            await executor.execute(_route(venue, x, y), ONE)

    @pytest.mark.asyncio
    async def test_rejects_float_amount(self, venue, x, y):
        executor = SwapExecutor(venue, token_in=y, token_out=x)
        with pytest.raises(ValidationError):
            await executor.execute(_route(venue, x, y), 1.5)
