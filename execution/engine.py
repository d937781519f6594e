"""
execution/engine.py - Arbitrage engine (invocation surface).

One call to execute_arbitrage is one strict serial cycle:

    authorize -> locate A, B -> price A, B -> decide -> leg 1 -> leg 2

Declines (pool missing, balance short, equal prices) return an outcome
with amount_out == 0 and issue no swaps. Unauthorized callers and
failed swap legs raise. Nothing is cached or retried, and overlapping
cycles are not serialized here.
"""

from uuid import uuid4

from core.constants import DeclineReason, Direction, OutcomeStatus
from core.exceptions import PoolNotFoundError, UnauthorizedError, VenueSwapError
from core.logging import get_logger, log_cycle, log_error
from core.math import require_non_negative_int
from core.models import ArbitrageConfig, ArbitrageOutcome
from core.time import elapsed_ms, now_ms
from dex.price_feed import PriceFeed
from dex.venue import ExchangeVenue
from execution.access_guard import AccessGuard
from execution.state_machine import CycleState, CycleStateMachine
from execution.swap_executor import SwapExecutor
from strategy.decider import ArbitrageDecider, spread_bps

logger = get_logger("tierarb.engine")


class ArbitrageEngine:
    """
    Two-pool fee-tier arbitrage engine.

    Usage:
        engine = ArbitrageEngine(config, venue)
        outcome = await engine.execute_arbitrage(caller=owner, amount_in=10**18)
        price = await engine.get_price(500)
    """

    def __init__(self, config: ArbitrageConfig, venue: ExchangeVenue):
        self.config = config
        self.venue = venue
        self.guard = AccessGuard(config.controller)
        self.price_feed = PriceFeed(venue, venue, config.token_in, config.token_out)
        self.decider = ArbitrageDecider()
        self.executor = SwapExecutor(venue, config.token_in, config.token_out)

    async def get_price(self, fee_tier: int) -> int:
        """
        Normalized price of the configured pair at fee_tier.

        Raises:
            PoolNotFoundError: no pool deployed at that tier
        """
        return await self.price_feed.get_price(fee_tier)

    async def execute_arbitrage(self, caller: str, amount_in: int) -> ArbitrageOutcome:
        """
        Run one decision cycle.

        Raises:
            UnauthorizedError: caller is not the controller
            VenueSwapError: a swap leg failed (holdings rolled back)
            ValidationError: amount_in is not a non-negative int
        """
        cycle_id = f"cycle_{uuid4().hex[:12]}"
        start_ms = now_ms()
        sm = CycleStateMachine(cycle_id=cycle_id)
        cfg = self.config

        sm.transition_to(CycleState.AUTHORIZING)
        try:
            self.guard.authorize(caller)
        except UnauthorizedError:
            sm.transition_to(CycleState.DENIED, reason="caller is not the controller")
            raise

        require_non_negative_int(amount_in, "amount_in")

        sm.transition_to(CycleState.LOCATING)
        try:
            pool_a = await self.price_feed.resolve(cfg.fee_tier_a)
            pool_b = await self.price_feed.resolve(cfg.fee_tier_b)
        except PoolNotFoundError as e:
            sm.transition_to(CycleState.POOL_NOT_FOUND, reason=e.message)
            return self._finish(
                sm,
                ArbitrageOutcome.declined(
                    cycle_id,
                    amount_in,
                    DeclineReason.POOL_NOT_FOUND,
                    metadata={"fee_tier": e.details.get("fee_tier")},
                ),
                start_ms,
            )

        sm.transition_to(CycleState.PRICING)
        price_a = await self.price_feed.price_of(pool_a)
        price_b = await self.price_feed.price_of(pool_b)

        sm.transition_to(CycleState.DECIDING)
        direction = self.decider.decide(price_a, price_b)
        route = self.decider.route(direction, pool_a, pool_b)
        priced = {"price_a": price_a, "price_b": price_b, "direction": direction}

        if route is None:
            sm.transition_to(CycleState.DECLINED, reason="prices equal")
            return self._finish(
                sm,
                ArbitrageOutcome.declined(cycle_id, amount_in, DeclineReason.NO_OPPORTUNITY, **priced),
                start_ms,
            )

        logger.info(
            "Opportunity found",
            extra={"context": {
                "cycle_id": cycle_id,
                "direction": direction.value,
                "price_a": price_a,
                "price_b": price_b,
                "spread_bps": spread_bps(price_a, price_b),
                "buy_fee_tier": route.buy_pool.fee_tier,
                "sell_fee_tier": route.sell_pool.fee_tier,
            }},
        )

        sm.transition_to(CycleState.EXECUTING)
        try:
            result = await self.executor.execute(route, amount_in)
        except VenueSwapError as e:
            sm.transition_to(CycleState.FAILED, reason=e.message)
            log_error(
                logger,
                e.code.value,
                e.message,
                cycle_id=cycle_id,
                path=[s.value for s in sm.path],
                details=e.details,
            )
            raise

        if not result.is_executed:
            sm.transition_to(CycleState.DECLINED, reason="insufficient balance")
            return self._finish(
                sm,
                ArbitrageOutcome.declined(cycle_id, amount_in, result.decline_reason, **priced),
                start_ms,
            )

        sm.transition_to(CycleState.DONE)
        return self._finish(
            sm,
            ArbitrageOutcome(
                cycle_id=cycle_id,
                status=OutcomeStatus.EXECUTED,
                amount_in=amount_in,
                amount_out=result.amount_out,
                buy_leg=result.buy_leg,
                sell_leg=result.sell_leg,
                **priced,
            ),
            start_ms,
        )

    def _finish(
        self,
        sm: CycleStateMachine,
        outcome: ArbitrageOutcome,
        start_ms: int,
    ) -> ArbitrageOutcome:
        outcome.latency_ms = elapsed_ms(start_ms)
        outcome.metadata["path"] = [s.value for s in sm.path]

        extra = {
            "direction": outcome.direction.value,
            "latency_ms": outcome.latency_ms,
        }
        if outcome.decline_reason:
            extra["decline_reason"] = outcome.decline_reason.value
        if outcome.is_executed:
            extra["pnl"] = outcome.pnl
            if outcome.direction != Direction.NO_OPPORTUNITY and outcome.pnl < 0:
                logger.warning(
                    "Cycle executed at a loss",
                    extra={"context": {"cycle_id": outcome.cycle_id, "pnl": outcome.pnl}},
                )

        log_cycle(
            logger,
            cycle_id=outcome.cycle_id,
            status=outcome.status.value,
            amount_in=outcome.amount_in,
            amount_out=outcome.amount_out,
            **extra,
        )
        return outcome
