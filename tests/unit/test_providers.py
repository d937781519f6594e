"""
tests/unit/test_providers.py - eth_call transport and endpoint failover.
"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from chains.providers import RPCProvider, resolve_rpc_urls
from core.exceptions import ErrorCode, InfraError

POOL = "0x" + "11" * 20
SLOT0 = "0x3850c7bd"


def _json_response(payload) -> MagicMock:
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


@pytest.fixture
def no_alchemy_key(monkeypatch):
    monkeypatch.delenv("ALCHEMY_API_KEY", raising=False)


class TestResolveUrls:

    def test_alchemy_dropped_without_key(self, no_alchemy_key):
        assert resolve_rpc_urls([
            "https://arb-mainnet.g.alchemy.com/v2/${ALCHEMY_API_KEY}",
            "https://arb1.arbitrum.io/rpc",
        ]) == ["https://arb1.arbitrum.io/rpc"]

    def test_alchemy_key_substituted(self, monkeypatch):
        monkeypatch.setenv("ALCHEMY_API_KEY", "secret")
        provider = RPCProvider(42161, ["https://arb-mainnet.g.alchemy.com/v2/${ALCHEMY_API_KEY}"])
        assert provider.rpc_urls == ["https://arb-mainnet.g.alchemy.com/v2/secret"]


class TestEthCall:

    @pytest.fixture
    def provider(self, no_alchemy_key):
        provider = RPCProvider(42161, ["https://rpc-1.example", "https://rpc-2.example"])
        provider._client = MagicMock()
        provider._client.post = AsyncMock()
        return provider

    @pytest.mark.asyncio
    async def test_success(self, provider):
        provider._client.post.return_value = _json_response({"jsonrpc": "2.0", "result": "0x01", "id": 1})

        result = await provider.eth_call(POOL, SLOT0, label="slot0")

        assert result.data == "0x01"
        assert result.endpoint == "https://rpc-1.example"
        assert provider.last_endpoint == "https://rpc-1.example"
        payload = provider._client.post.call_args.kwargs["json"]
        assert payload["method"] == "eth_call"
        assert payload["params"] == [{"to": POOL, "data": SLOT0}, "latest"]

    @pytest.mark.asyncio
    async def test_failover_on_timeout(self, provider):
        provider._client.post.side_effect = [
            httpx.TimeoutException("slow"),
            _json_response({"jsonrpc": "2.0", "result": "0x02", "id": 2}),
        ]
        result = await provider.eth_call(POOL, SLOT0)

        assert result.data == "0x02"
        assert result.endpoint == "https://rpc-2.example"

    @pytest.mark.asyncio
    async def test_reply_without_result_fails_over(self, provider):
        provider._client.post.side_effect = [
            _json_response({"jsonrpc": "2.0", "id": 1}),
            _json_response({"jsonrpc": "2.0", "result": "0x03", "id": 2}),
        ]
        assert (await provider.eth_call(POOL, SLOT0)).data == "0x03"

    @pytest.mark.asyncio
    async def test_all_failed_reports_each_endpoint(self, provider):
        provider._client.post.side_effect = [
            _json_response({"jsonrpc": "2.0", "error": {"message": "execution reverted"}, "id": 1}),
            httpx.ConnectError("refused"),
        ]
        with pytest.raises(InfraError) as exc_info:
            await provider.eth_call(POOL, SLOT0, label="slot0")

        err = exc_info.value
        assert err.code == ErrorCode.INFRA_RPC_ERROR
        assert err.details["label"] == "slot0"
        assert err.details["to"] == POOL
        assert err.details["failures"] == [
            {"url": "https://rpc-1.example", "error": "RPC error: execution reverted"},
            {"url": "https://rpc-2.example", "error": "refused"},
        ]
        assert provider.last_endpoint is None

    @pytest.mark.asyncio
    async def test_no_endpoints(self, no_alchemy_key):
        with pytest.raises(InfraError) as exc_info:
            await RPCProvider(1, []).eth_call(POOL, SLOT0, label="getPool")
        assert exc_info.value.details["label"] == "getPool"
