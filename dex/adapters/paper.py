"""
dex/adapters/paper.py - In-memory paper venue.

Stands in for a V3 factory + swap router + ERC20 ledger so the full
decision cycle can run without a chain:

- Pools keyed by (token0, token1, fee) with token0 < token1 by address
- Spot price set directly as sqrtPriceX96 (set_pool_price)
- Swaps fill at the pool's normalized spot price less the fee tier,
  bounded by the pool's reserve of the output token
- ERC20-style balances per holder
- atomic() snapshots balances and reserves and restores them if the
  block raises

Prices do not move on swaps. This is a paper venue, not a simulator.
"""

import copy
import hashlib
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from core.constants import FEE_DENOMINATOR, PRICE_SCALE
from core.exceptions import ValidationError, VenueSwapError
from core.logging import get_logger
from core.math import (
    human_price_to_sqrt_price_x96,
    human_to_wei,
    normalize_sqrt_price_x96,
    safe_int,
)
from core.models import PoolHandle, Token
from core.validators import validate_address, validate_fee_tier

logger = get_logger(__name__)

PoolKey = Tuple[str, str, int]


def _pool_key(token_a: Token, token_b: Token, fee_tier: int) -> PoolKey:
    a, b = sorted([token_a.address.lower(), token_b.address.lower()])
    return a, b, fee_tier


def _pool_address(key: PoolKey) -> str:
    digest = hashlib.sha256(f"{key[0]}:{key[1]}:{key[2]}".encode()).hexdigest()
    return "0x" + digest[:40]


@dataclass
class PaperPool:
    """Pool state. token0 is the lower address, as on-chain."""
    handle: PoolHandle
    token0: Token
    token1: Token
    sqrt_price_x96: int = 0
    reserves: Dict[str, int] = field(default_factory=dict)
    failing: bool = False

    def quote(self, amount_in: int, token_in: Token) -> int:
        """
        Output for amount_in at spot, after the fee tier.

        price = token1 per token0 (18 decimals).
        """
        price = normalize_sqrt_price_x96(self.sqrt_price_x96)
        if price == 0:
            raise VenueSwapError(
                f"Pool {self.handle.address} has no liquidity",
                details={"pool_address": self.handle.address, "fee_tier": self.handle.fee_tier},
            )

        amount_after_fee = amount_in * (FEE_DENOMINATOR - self.handle.fee_tier) // FEE_DENOMINATOR
        if token_in == self.token0:
            return amount_after_fee * price // PRICE_SCALE
        return amount_after_fee * PRICE_SCALE // price


@dataclass(frozen=True)
class SwapCall:
    """One swap request as received by the paper router."""
    pool_address: str
    fee_tier: int
    token_in: str
    token_out: str
    amount_in: int
    amount_out: Optional[int]
    ok: bool


class PaperVenue:
    """
    In-memory ExchangeVenue.

    Usage:
        venue = PaperVenue(holder=bot_address)
        venue.create_pool(weth, usdc, 500, sqrt_price_x96=...)
        venue.mint(weth, bot_address, 10**18)
    """

    def __init__(self, holder: str, default_reserve: int = 10**30):
        self.holder = validate_address(holder, "holder")
        self.default_reserve = default_reserve
        self._pools: Dict[PoolKey, PaperPool] = {}
        self._balances: Dict[Tuple[str, str], int] = {}
        self.swap_calls: List[SwapCall] = []

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    def create_pool(
        self,
        token_a: Token,
        token_b: Token,
        fee_tier: int,
        sqrt_price_x96: int = 0,
        reserve_a: Optional[int] = None,
        reserve_b: Optional[int] = None,
    ) -> PoolHandle:
        """Deploy a pool. Re-deploying an existing triple raises."""
        validate_fee_tier(fee_tier)
        if token_a == token_b:
            raise ValidationError("Pool tokens must differ", details={"token": token_a.address})

        key = _pool_key(token_a, token_b, fee_tier)
        if key in self._pools:
            raise ValidationError(
                "Pool already exists",
                details={"pool_address": self._pools[key].handle.address, "fee_tier": fee_tier},
            )

        token0, token1 = (token_a, token_b) if key[0] == token_a.address.lower() else (token_b, token_a)
        handle = PoolHandle(
            address=_pool_address(key),
            token_a=token0,
            token_b=token1,
            fee_tier=fee_tier,
        )
        self._pools[key] = PaperPool(
            handle=handle,
            token0=token0,
            token1=token1,
            sqrt_price_x96=sqrt_price_x96,
            reserves={
                token_a.address.lower(): self.default_reserve if reserve_a is None else reserve_a,
                token_b.address.lower(): self.default_reserve if reserve_b is None else reserve_b,
            },
        )
        logger.debug(
            "Paper pool created",
            extra={"context": {"pool_address": handle.address, "fee_tier": fee_tier}},
        )
        return handle

    def set_pool_price(
        self,
        token_a: Token,
        token_b: Token,
        fee_tier: int,
        sqrt_price_x96: int,
    ) -> None:
        """Set a pool's sqrtPriceX96, deploying the pool if needed."""
        key = _pool_key(token_a, token_b, fee_tier)
        if key not in self._pools:
            self.create_pool(token_a, token_b, fee_tier, sqrt_price_x96=sqrt_price_x96)
            return
        self._pools[key].sqrt_price_x96 = sqrt_price_x96

    def set_failing(self, token_a: Token, token_b: Token, fee_tier: int, failing: bool = True) -> None:
        """Make every swap through this pool revert."""
        self._require_pool(token_a, token_b, fee_tier).failing = failing

    def pool_state(self, token_a: Token, token_b: Token, fee_tier: int) -> PaperPool:
        return self._require_pool(token_a, token_b, fee_tier)

    def _require_pool(self, token_a: Token, token_b: Token, fee_tier: int) -> PaperPool:
        key = _pool_key(token_a, token_b, fee_tier)
        if key not in self._pools:
            raise ValidationError(
                "Unknown paper pool",
                details={"token_a": token_a.address, "token_b": token_b.address, "fee_tier": fee_tier},
            )
        return self._pools[key]

    # -------------------------------------------------------------------------
    # ERC20 ledger
    # -------------------------------------------------------------------------

    def mint(self, token: Token, account: str, amount: int) -> None:
        key = (token.address.lower(), account.lower())
        self._balances[key] = self._balances.get(key, 0) + amount

    def balance_of_account(self, token: Token, account: str) -> int:
        return self._balances.get((token.address.lower(), account.lower()), 0)

    def _debit(self, token: Token, account: str, amount: int) -> None:
        key = (token.address.lower(), account.lower())
        self._balances[key] = self._balances.get(key, 0) - amount

    # -------------------------------------------------------------------------
    # ExchangeVenue
    # -------------------------------------------------------------------------

    async def get_pool(
        self,
        token_a: Token,
        token_b: Token,
        fee_tier: int,
    ) -> Optional[PoolHandle]:
        pool = self._pools.get(_pool_key(token_a, token_b, fee_tier))
        return pool.handle if pool else None

    async def get_sqrt_price_x96(self, pool: PoolHandle) -> int:
        return self._require_pool(pool.token_a, pool.token_b, pool.fee_tier).sqrt_price_x96

    async def balance_of(self, token: Token) -> int:
        return self.balance_of_account(token, self.holder)

    async def swap_exact_input(
        self,
        pool: PoolHandle,
        amount_in: int,
        token_in: Token,
        token_out: Token,
    ) -> int:
        state = self._pools.get(_pool_key(token_in, token_out, pool.fee_tier))
        if state is None or state.handle.address != pool.address:
            self._record(pool, token_in, token_out, amount_in, None, ok=False)
            raise VenueSwapError(
                "Swap through unknown pool",
                details={"pool_address": pool.address, "fee_tier": pool.fee_tier},
            )

        try:
            if state.failing:
                raise VenueSwapError(
                    "Swap reverted by pool",
                    details={"pool_address": pool.address, "fee_tier": pool.fee_tier},
                )
            if self.balance_of_account(token_in, self.holder) < amount_in:
                raise VenueSwapError(
                    "STF: input exceeds holder balance",
                    details={"token": token_in.address, "amount_in": amount_in},
                )

            amount_out = state.quote(amount_in, token_in)
            reserve_out = state.reserves.get(token_out.address.lower(), 0)
            if amount_out > reserve_out:
                raise VenueSwapError(
                    "Insufficient pool liquidity",
                    details={
                        "pool_address": pool.address,
                        "amount_out": amount_out,
                        "reserve_out": reserve_out,
                    },
                )
        except VenueSwapError:
            self._record(pool, token_in, token_out, amount_in, None, ok=False)
            raise

        state.reserves[token_in.address.lower()] = state.reserves.get(token_in.address.lower(), 0) + amount_in
        state.reserves[token_out.address.lower()] = reserve_out - amount_out
        self._debit(token_in, self.holder, amount_in)
        self.mint(token_out, self.holder, amount_out)

        self._record(pool, token_in, token_out, amount_in, amount_out, ok=True)
        return amount_out

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Snapshot ledger and reserves; restore both if the block raises."""
        balances = dict(self._balances)
        reserves = {key: copy.copy(pool.reserves) for key, pool in self._pools.items()}
        try:
            yield
        except BaseException:
            self._balances = balances
            for key, saved in reserves.items():
                if key in self._pools:
                    self._pools[key].reserves = saved
            logger.warning("Paper venue rolled back", extra={"context": {"holder": self.holder}})
            raise

    def _record(
        self,
        pool: PoolHandle,
        token_in: Token,
        token_out: Token,
        amount_in: int,
        amount_out: Optional[int],
        ok: bool,
    ) -> None:
        self.swap_calls.append(SwapCall(
            pool_address=pool.address,
            fee_tier=pool.fee_tier,
            token_in=token_in.address,
            token_out=token_out.address,
            amount_in=amount_in,
            amount_out=amount_out,
            ok=ok,
        ))


def build_paper_venue(
    holder: str,
    token_in: Token,
    token_out: Token,
    paper: Dict[str, Any],
) -> PaperVenue:
    """
    Seed a PaperVenue from the `paper:` config section.

    paper:
      balances: {token_in: "1000", token_out: "1000"}   # token units
      pools:
        - {fee_tier: 500, price: "2500"}                # token1 per token0
        - {fee_tier: 3000, sqrt_price_x96: 3961408125713216879677197516800}
    """
    venue = PaperVenue(holder=holder)
    tokens = {"token_in": token_in, "token_out": token_out}

    for name, amount in (paper.get("balances") or {}).items():
        if name not in tokens:
            raise ValidationError(f"Unknown paper balance token: {name}")
        token = tokens[name]
        venue.mint(token, holder, human_to_wei(str(amount), token.decimals))

    for entry in paper.get("pools") or []:
        fee_tier = entry.get("fee_tier")
        if "sqrt_price_x96" in entry:
            sqrt_price = safe_int(entry["sqrt_price_x96"], "sqrt_price_x96")
        else:
            sqrt_price = human_price_to_sqrt_price_x96(str(entry.get("price", "0")))
        venue.create_pool(token_in, token_out, fee_tier, sqrt_price_x96=sqrt_price)

    return venue
