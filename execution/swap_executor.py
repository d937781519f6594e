"""
execution/swap_executor.py - Two-leg swap pipeline.

EXECUTION CONTRACT:
===================
  1. amount_in > holdings of token_in  -> declined, no swap calls
  2. leg 1 (BUY):  amount_in of token_in  -> buy_pool  -> intermediate token_out
  3. leg 2 (SELL): all of leg 1 output    -> sell_pool -> amount_out of token_in

Both legs run inside the venue's atomic() boundary: if either raises,
the venue restores holdings and VenueSwapError propagates. A failed leg
is never reported as a zero-output decline.

No minimum-output protection on either leg, and amount_out is not
compared with amount_in here.
===================
"""

from dataclasses import dataclass
from typing import Optional

from core.constants import DeclineReason, SwapLeg
from core.exceptions import InsufficientBalanceError, VenueSwapError
from core.logging import get_logger, log_swap
from core.math import require_non_negative_int
from core.models import LegFill, PoolHandle, Route, Token
from dex.venue import ExchangeVenue

logger = get_logger(__name__)


@dataclass(frozen=True)
class SwapResult:
    """Outcome of SwapExecutor.execute."""
    amount_in: int
    amount_out: int = 0
    buy_leg: Optional[LegFill] = None
    sell_leg: Optional[LegFill] = None
    decline_reason: Optional[DeclineReason] = None

    @property
    def is_executed(self) -> bool:
        return self.sell_leg is not None


class SwapExecutor:
    """
    Executes buy-then-sell through two pools of the same pair.

    token_in is the leg-1 input and the final output; token_out is the
    intermediate token.
    """

    def __init__(self, venue: ExchangeVenue, token_in: Token, token_out: Token):
        self.venue = venue
        self.token_in = token_in
        self.token_out = token_out

    async def check_balance(self, amount_in: int) -> int:
        """
        Return current holdings of token_in.

        Raises:
            InsufficientBalanceError: amount_in exceeds holdings
        """
        balance = await self.venue.balance_of(self.token_in)
        if amount_in > balance:
            raise InsufficientBalanceError(
                f"amount_in {amount_in} exceeds balance {balance} of {self.token_in}",
                details={
                    "token": self.token_in.address,
                    "amount_in": amount_in,
                    "balance": balance,
                },
            )
        return balance

    async def execute(self, route: Route, amount_in: int) -> SwapResult:
        """
        Run both legs for route.

        Returns a declined SwapResult (amount_out == 0) when holdings are
        short; raises VenueSwapError when a leg fails.
        """
        require_non_negative_int(amount_in, "amount_in")

        try:
            await self.check_balance(amount_in)
        except InsufficientBalanceError as e:
            logger.info(
                "Execution declined: insufficient balance",
                extra={"context": e.details},
            )
            return SwapResult(
                amount_in=amount_in,
                decline_reason=DeclineReason.INSUFFICIENT_BALANCE,
            )

        async with self.venue.atomic():
            buy_leg = await self._swap(
                SwapLeg.BUY, route.buy_pool, amount_in, self.token_in, self.token_out,
            )
            sell_leg = await self._swap(
                SwapLeg.SELL, route.sell_pool, buy_leg.amount_out, self.token_out, self.token_in,
            )

        return SwapResult(
            amount_in=amount_in,
            amount_out=sell_leg.amount_out,
            buy_leg=buy_leg,
            sell_leg=sell_leg,
        )

    async def _swap(
        self,
        leg: SwapLeg,
        pool: PoolHandle,
        amount_in: int,
        token_in: Token,
        token_out: Token,
    ) -> LegFill:
        details = {
            "leg": leg.value,
            "pool_address": pool.address,
            "fee_tier": pool.fee_tier,
            "amount_in": amount_in,
        }

        try:
            amount_out = await self.venue.swap_exact_input(pool, amount_in, token_in, token_out)
        except VenueSwapError as e:
            raise VenueSwapError(
                f"{leg.value} leg failed: {e.message}",
                details={**e.details, **details},
            ) from e
        except Exception as e:
            raise VenueSwapError(
                f"{leg.value} leg failed: {e}",
                details={**details, "error": str(e)},
            ) from e

        if isinstance(amount_out, bool) or not isinstance(amount_out, int) or amount_out < 0:
            raise VenueSwapError(
                f"{leg.value} leg returned invalid amount_out: {amount_out!r}",
                details=details,
            )

        log_swap(
            logger,
            leg=leg.value,
            pool_address=pool.address,
            fee_tier=pool.fee_tier,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return LegFill(
            leg=leg,
            pool=pool,
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            amount_out=amount_out,
        )
