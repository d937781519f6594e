# PATH: core/models.py
"""
Core data models for TIERARB.

All amounts are ints in the token's smallest unit and all prices are
ints scaled by 10**18. Nothing here is persisted: an ArbitrageOutcome
lives for exactly one decision cycle.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.constants import DeclineReason, Direction, OutcomeStatus, SwapLeg
from core.exceptions import ValidationError
from core.validators import (
    same_address,
    validate_address,
    validate_decimals,
    validate_fee_tier,
)


@dataclass(frozen=True, eq=False)
class Token:
    """Fungible token handle. Identity is the address (case-insensitive)."""
    address: str
    symbol: str = ""
    decimals: int = 18

    def __post_init__(self):
        validate_address(self.address, "token address")
        validate_decimals(self.decimals)

    def __hash__(self) -> int:
        return hash(self.address.lower())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return False
        return same_address(self.address, other.address)

    def __str__(self) -> str:
        return self.symbol or self.address


@dataclass(frozen=True)
class PoolHandle:
    """A (token_a, token_b, fee_tier) pool as resolved at lookup time."""
    address: str
    token_a: Token
    token_b: Token
    fee_tier: int


@dataclass(frozen=True)
class Route:
    """Buy pool (leg 1) and sell pool (leg 2) picked for a direction."""
    direction: Direction
    buy_pool: PoolHandle
    sell_pool: PoolHandle


@dataclass(frozen=True)
class LegFill:
    """Typed intermediate result of one swap leg."""
    leg: SwapLeg
    pool: PoolHandle
    token_in: Token
    token_out: Token
    amount_in: int
    amount_out: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "leg": self.leg.value,
            "pool_address": self.pool.address,
            "fee_tier": self.pool.fee_tier,
            "token_in": self.token_in.address,
            "token_out": self.token_out.address,
            "amount_in": str(self.amount_in),
            "amount_out": str(self.amount_out),
        }


@dataclass(frozen=True)
class ArbitrageConfig:
    """
    Construction-time configuration. Immutable once built.

    token_in is the leg-1 input (and final output) token; token_out is
    the intermediate token. fee_tier_a / fee_tier_b select the two pools.
    """
    token_in: Token
    token_out: Token
    fee_tier_a: int
    fee_tier_b: int
    controller: str
    swap_router: str
    pool_registry: str
    chain_id: int = 0

    def __post_init__(self):
        validate_fee_tier(self.fee_tier_a, "fee_tier_a")
        validate_fee_tier(self.fee_tier_b, "fee_tier_b")
        validate_address(self.controller, "controller")
        validate_address(self.swap_router, "swap_router")
        validate_address(self.pool_registry, "pool_registry")
        if self.fee_tier_a == self.fee_tier_b:
            raise ValidationError(
                "fee_tier_a and fee_tier_b must differ",
                details={"fee_tier": self.fee_tier_a},
            )
        if self.token_in == self.token_out:
            raise ValidationError(
                "token_in and token_out must differ",
                details={"token": self.token_in.address},
            )


@dataclass
class ArbitrageOutcome:
    """
    Result of one decision cycle.

    DECLINED always carries amount_out == 0 and a decline_reason.
    EXECUTED carries both legs; amount_out is the leg-2 output and is
    NOT guaranteed to exceed amount_in.
    """
    cycle_id: str
    status: OutcomeStatus
    amount_in: int
    amount_out: int = 0
    direction: Direction = Direction.NO_OPPORTUNITY
    decline_reason: Optional[DeclineReason] = None
    price_a: Optional[int] = None
    price_b: Optional[int] = None
    buy_leg: Optional[LegFill] = None
    sell_leg: Optional[LegFill] = None
    latency_ms: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def declined(
        cls,
        cycle_id: str,
        amount_in: int,
        reason: DeclineReason,
        **kwargs: Any,
    ) -> "ArbitrageOutcome":
        return cls(
            cycle_id=cycle_id,
            status=OutcomeStatus.DECLINED,
            amount_in=amount_in,
            amount_out=0,
            decline_reason=reason,
            **kwargs,
        )

    @property
    def is_executed(self) -> bool:
        return self.status == OutcomeStatus.EXECUTED

    @property
    def is_declined(self) -> bool:
        return self.status == OutcomeStatus.DECLINED

    @property
    def pnl(self) -> int:
        """amount_out - amount_in for executed cycles (may be negative)."""
        if not self.is_executed:
            return 0
        return self.amount_out - self.amount_in

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cycle_id": self.cycle_id,
            "status": self.status.value,
            "amount_in": str(self.amount_in),
            "amount_out": str(self.amount_out),
            "pnl": str(self.pnl),
            "direction": self.direction.value,
            "decline_reason": self.decline_reason.value if self.decline_reason else None,
            "price_a": str(self.price_a) if self.price_a is not None else None,
            "price_b": str(self.price_b) if self.price_b is not None else None,
            "buy_leg": self.buy_leg.to_dict() if self.buy_leg else None,
            "sell_leg": self.sell_leg.to_dict() if self.sell_leg else None,
            "latency_ms": self.latency_ms,
            "metadata": self.metadata,
        }
