"""
tests/unit/test_uniswap_v3_adapter.py - Read-only Uniswap V3 venue.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from chains.providers import CallResult
from core.constants import Q96
from core.exceptions import ErrorCode, InfraError, PoolNotFoundError, ValidationError
from core.models import Token
from dex.adapters.uniswap_v3 import (
    SELECTOR_BALANCE_OF,
    SELECTOR_GET_POOL,
    SELECTOR_SLOT0,
    UniswapV3Reader,
    decode_address,
    decode_words,
    encode_balance_of,
    encode_get_pool,
    encode_slot0,
)
from dex.price_feed import PriceFeed

FACTORY = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
HOLDER = "0x" + "ab" * 20
WETH = "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1"
ARB = "0x912CE59144191C1204E64559FE8253a0e49E6548"
POOL = "0xc6f780497a95e246eb9449f5e4770916dcd6396a"


def _word(value: int) -> str:
    return hex(value)[2:].zfill(64)


def _response(hex_result: str) -> CallResult:
    return CallResult(data=hex_result, endpoint="mock", latency_ms=5)


class TestEncoding:
    """ABI encoding."""

    def test_encode_get_pool(self):
        data = encode_get_pool(WETH, ARB, 500)
        assert data.startswith(f"0x{SELECTOR_GET_POOL}")
        assert data.startswith("0x1698ee82")
        # 0x + selector(8) + 3 words
        assert len(data) == 2 + 8 + 3 * 64
        assert data.endswith(_word(500))
        assert WETH[2:].lower() in data

    def test_encode_slot0(self):
        assert encode_slot0() == f"0x{SELECTOR_SLOT0}" == "0x3850c7bd"

    def test_encode_balance_of(self):
        data = encode_balance_of(HOLDER)
        assert data.startswith(f"0x{SELECTOR_BALANCE_OF}")
        assert len(data) == 2 + 8 + 64


class TestDecoding:

    def test_decode_words(self):
        assert decode_words("0x" + _word(7) + _word(9), min_words=2) == [7, 9]

    def test_decode_empty_raises(self):
        with pytest.raises(InfraError) as exc_info:
            decode_words("0x")
        assert exc_info.value.code == ErrorCode.INFRA_DECODE_ERROR

    def test_decode_short_raises(self):
        with pytest.raises(InfraError) as exc_info:
            decode_words("0x" + "00" * 20)
        assert exc_info.value.code == ErrorCode.INFRA_DECODE_ERROR

    def test_decode_address(self):
        assert decode_address("0x" + POOL[2:].zfill(64)) == POOL


class TestUniswapV3Reader:

    @pytest.fixture
    def mock_provider(self):
        provider = MagicMock()
        provider.eth_call = AsyncMock()
        return provider

    @pytest.fixture
    def reader(self, mock_provider):
        return UniswapV3Reader(mock_provider, FACTORY, HOLDER)

    @pytest.fixture
    def tokens(self):
        return Token(address=WETH, symbol="WETH"), Token(address=ARB, symbol="ARB")

    @pytest.mark.asyncio
    async def test_get_pool(self, reader, mock_provider, tokens):
        mock_provider.eth_call.return_value = _response("0x" + POOL[2:].zfill(64))

        pool = await reader.get_pool(*tokens, 500)

        assert pool.address == POOL
        assert pool.fee_tier == 500
        call = mock_provider.eth_call.call_args
        assert call.kwargs["to"] == FACTORY
        assert call.kwargs["data"] == encode_get_pool(WETH, ARB, 500)
        assert call.kwargs["label"] == "getPool"

    @pytest.mark.asyncio
    async def test_zero_address_is_missing(self, reader, mock_provider, tokens):
        mock_provider.eth_call.return_value = _response("0x" + _word(0))
        assert await reader.get_pool(*tokens, 12345) is None

    @pytest.mark.asyncio
    async def test_slot0_first_word(self, reader, mock_provider, tokens):
        mock_provider.eth_call.side_effect = [
            _response("0x" + POOL[2:].zfill(64)),
            # sqrtPriceX96, tick, observationIndex
            _response("0x" + _word(2 * Q96) + _word(13863) + _word(1)),
        ]
        pool = await reader.get_pool(*tokens, 500)
        assert await reader.get_sqrt_price_x96(pool) == 2 * Q96

    @pytest.mark.asyncio
    async def test_balance_of(self, reader, mock_provider, tokens):
        mock_provider.eth_call.return_value = _response("0x" + _word(42))
        assert await reader.balance_of(tokens[0]) == 42
        assert mock_provider.eth_call.call_args.kwargs["to"] == WETH

    @pytest.mark.asyncio
    async def test_price_feed_over_reader(self, reader, mock_provider, tokens):
        mock_provider.eth_call.side_effect = [
            _response("0x" + POOL[2:].zfill(64)),
            _response("0x" + _word(2 * Q96) + _word(0)),
        ]
        feed = PriceFeed(reader, reader, *tokens)
        assert await feed.get_price(500) == 4 * 10**18

    @pytest.mark.asyncio
    async def test_price_feed_missing_pool(self, reader, mock_provider, tokens):
        mock_provider.eth_call.return_value = _response("0x" + _word(0))
        with pytest.raises(PoolNotFoundError):
            await PriceFeed(reader, reader, *tokens).get_price(12345)

    @pytest.mark.asyncio
    async def test_negative_tier_never_encoded(self, reader, mock_provider, tokens):
        with pytest.raises(ValidationError):
            await PriceFeed(reader, reader, *tokens).get_price(-1)
        mock_provider.eth_call.assert_not_awaited()
