"""
dex/venue.py - External exchange venue interfaces.

The engine never talks to a chain directly. It consumes four narrow
capabilities, each of which may be backed by a different object:

- PoolRegistry:    (token_a, token_b, fee_tier) -> PoolHandle | None
- PriceOracle:     PoolHandle -> sqrtPriceX96
- SwapRouter:      exact-input single-pool swap -> amount_out
- BalanceProvider: the engine's own holdings per token

ExchangeVenue bundles them with an atomic() boundary: both swap legs
run inside it and are rolled back together if either raises.
"""

from typing import AsyncContextManager, Optional, Protocol, runtime_checkable

from core.models import PoolHandle, Token


@runtime_checkable
class PoolRegistry(Protocol):
    async def get_pool(
        self,
        token_a: Token,
        token_b: Token,
        fee_tier: int,
    ) -> Optional[PoolHandle]:
        ...


@runtime_checkable
class PriceOracle(Protocol):
    async def get_sqrt_price_x96(self, pool: PoolHandle) -> int:
        ...


@runtime_checkable
class SwapRouter(Protocol):
    async def swap_exact_input(
        self,
        pool: PoolHandle,
        amount_in: int,
        token_in: Token,
        token_out: Token,
    ) -> int:
        ...


@runtime_checkable
class BalanceProvider(Protocol):
    async def balance_of(self, token: Token) -> int:
        ...


@runtime_checkable
class ExchangeVenue(PoolRegistry, PriceOracle, SwapRouter, BalanceProvider, Protocol):
    def atomic(self) -> AsyncContextManager[None]:
        ...
