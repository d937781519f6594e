"""
dex/adapters/uniswap_v3.py - Read-only Uniswap V3 venue over JSON-RPC.

Implements the read side of the venue:
- PoolRegistry via UniswapV3Factory.getPool(address,address,uint24)
- PriceOracle via UniswapV3Pool.slot0() (sqrtPriceX96 is word 0)
- BalanceProvider via ERC20.balanceOf(address)

Swap submission needs a signer and stays outside this package.
"""

from core.constants import MAX_SQRT_PRICE_X96, ZERO_ADDRESS
from core.exceptions import ErrorCode, InfraError
from core.logging import get_logger
from core.models import PoolHandle, Token
from core.validators import same_address, validate_address
from chains.providers import RPCProvider

logger = get_logger(__name__)


# =============================================================================
# ABI ENCODING
# =============================================================================

# keccak256("getPool(address,address,uint24)")[:4]
SELECTOR_GET_POOL = "1698ee82"
# keccak256("slot0()")[:4]
SELECTOR_SLOT0 = "3850c7bd"
# keccak256("balanceOf(address)")[:4]
SELECTOR_BALANCE_OF = "70a08231"

WORD_HEX_CHARS = 64


def _encode_address(address: str) -> str:
    return address[2:].lower().zfill(WORD_HEX_CHARS)


def _encode_uint(value: int) -> str:
    return hex(value)[2:].zfill(WORD_HEX_CHARS)


def encode_get_pool(token_a: str, token_b: str, fee: int) -> str:
    """Encode getPool(tokenA, tokenB, fee) call data."""
    return (
        f"0x{SELECTOR_GET_POOL}"
        f"{_encode_address(token_a)}"
        f"{_encode_address(token_b)}"
        f"{_encode_uint(fee)}"
    )


def encode_slot0() -> str:
    return f"0x{SELECTOR_SLOT0}"


def encode_balance_of(account: str) -> str:
    return f"0x{SELECTOR_BALANCE_OF}{_encode_address(account)}"


def decode_words(hex_result: str, min_words: int = 1) -> list[int]:
    """
    Split an ABI return blob into 32-byte words.

    Raises:
        InfraError: empty or truncated response
    """
    if not hex_result or hex_result == "0x":
        raise InfraError(
            "Empty call response",
            code=ErrorCode.INFRA_DECODE_ERROR,
        )

    data = hex_result[2:] if hex_result.startswith("0x") else hex_result
    if len(data) < min_words * WORD_HEX_CHARS:
        raise InfraError(
            f"Call response too short: {len(data)} chars",
            code=ErrorCode.INFRA_DECODE_ERROR,
            details={"data_length": len(data), "raw": hex_result[:100]},
        )

    return [
        int(data[i:i + WORD_HEX_CHARS], 16)
        for i in range(0, len(data) - len(data) % WORD_HEX_CHARS, WORD_HEX_CHARS)
    ]


def decode_address(hex_result: str) -> str:
    word = decode_words(hex_result)[0]
    return "0x" + hex(word)[2:].zfill(40)


# =============================================================================
# ADAPTER
# =============================================================================

class UniswapV3Reader:
    """
    Read-only Uniswap V3 venue.

    Usage:
        reader = UniswapV3Reader(provider, factory_address, holder_address)
        pool = await reader.get_pool(weth, usdc, 500)
        sqrt_price = await reader.get_sqrt_price_x96(pool)
    """

    def __init__(
        self,
        provider: RPCProvider,
        factory_address: str,
        holder: str,
        block: str = "latest",
    ):
        self.provider = provider
        self.factory_address = validate_address(factory_address, "factory_address")
        self.holder = validate_address(holder, "holder")
        self.block = block

    async def get_pool(
        self,
        token_a: Token,
        token_b: Token,
        fee_tier: int,
    ) -> PoolHandle | None:
        response = await self.provider.eth_call(
            to=self.factory_address,
            data=encode_get_pool(token_a.address, token_b.address, fee_tier),
            block=self.block,
            label="getPool",
        )
        address = decode_address(response.data)

        if same_address(address, ZERO_ADDRESS):
            return None

        logger.debug(
            "Factory getPool",
            extra={"context": {
                "pool_address": address,
                "fee_tier": fee_tier,
                "latency_ms": response.latency_ms,
                "endpoint": response.endpoint,
            }},
        )
        return PoolHandle(address=address, token_a=token_a, token_b=token_b, fee_tier=fee_tier)

    async def get_sqrt_price_x96(self, pool: PoolHandle) -> int:
        response = await self.provider.eth_call(
            to=pool.address,
            data=encode_slot0(),
            block=self.block,
            label="slot0",
        )
        # slot0: (sqrtPriceX96, tick, observationIndex, ...)
        sqrt_price_x96 = decode_words(response.data)[0]
        if sqrt_price_x96 > MAX_SQRT_PRICE_X96:
            raise InfraError(
                "slot0 sqrtPriceX96 exceeds uint160",
                code=ErrorCode.INFRA_DECODE_ERROR,
                details={"pool_address": pool.address, "raw": response.data[:66]},
            )
        return sqrt_price_x96

    async def balance_of(self, token: Token) -> int:
        response = await self.provider.eth_call(
            to=token.address,
            data=encode_balance_of(self.holder),
            block=self.block,
            label="balanceOf",
        )
        return decode_words(response.data)[0]
