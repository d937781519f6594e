"""
chains/providers.py - JSON-RPC transport for the read-only Uniswap V3 venue.

The venue only ever needs eth_call: factory getPool, pool slot0 and
ERC20 balanceOf. Endpoints are tried in order and the first usable
answer wins. When every endpoint fails, the InfraError names the
contract read (label) and carries one failure entry per endpoint.

Failover lives here, below the venue boundary. The arbitrage core
itself never retries.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

import httpx
from dotenv import load_dotenv

from core.exceptions import ErrorCode, InfraError
from core.logging import get_logger
from core.time import now_ms

logger = get_logger(__name__)

load_dotenv()

ALCHEMY_KEY_PLACEHOLDER = "${ALCHEMY_API_KEY}"


def resolve_rpc_urls(urls: Iterable[str]) -> List[str]:
    """Substitute ${ALCHEMY_API_KEY}; alchemy URLs are skipped without a key."""
    api_key = os.getenv("ALCHEMY_API_KEY", "")
    resolved = []
    for url in urls:
        if "alchemy" in url.lower() and not api_key:
            continue
        resolved.append(url.replace(ALCHEMY_KEY_PLACEHOLDER, api_key))
    return resolved


@dataclass(frozen=True)
class CallResult:
    """Hex return data of one eth_call and the endpoint that served it."""
    data: str
    endpoint: str
    latency_ms: int


@dataclass(frozen=True)
class EndpointFailure:
    url: str
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "error": self.error}


def _reply_error(reply: Any) -> str | None:
    if not isinstance(reply, dict):
        return f"malformed reply: {type(reply).__name__}"
    if "error" in reply:
        err = reply["error"]
        message = err.get("message", str(err)) if isinstance(err, dict) else str(err)
        return f"RPC error: {message}"
    if not isinstance(reply.get("result"), str):
        return "reply has no hex result"
    return None


class RPCProvider:
    """
    eth_call over one or more JSON-RPC endpoints.

    Usage:
        async with RPCProvider(42161, urls) as provider:
            result = await provider.eth_call(pool, "0x3850c7bd", label="slot0")
    """

    def __init__(
        self,
        chain_id: int,
        rpc_urls: Iterable[str],
        timeout_seconds: int = 10,
    ):
        self.chain_id = chain_id
        self.timeout_seconds = timeout_seconds
        self.rpc_urls = resolve_rpc_urls(rpc_urls)
        self.last_endpoint: str | None = None
        self._client: httpx.AsyncClient | None = None
        self._request_id = 0

    async def __aenter__(self) -> "RPCProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _client_for_calls(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds))
        return self._client

    async def eth_call(
        self,
        to: str,
        data: str,
        block: str = "latest",
        label: str = "eth_call",
    ) -> CallResult:
        """
        Run eth_call against `to`, failing over across endpoints.

        Raises:
            InfraError: no endpoints, or every endpoint failed
        """
        if not self.rpc_urls:
            raise InfraError(
                f"{label}: no RPC endpoints configured",
                details={"chain_id": self.chain_id, "label": label, "to": to},
            )

        client = self._client_for_calls()
        failures: List[EndpointFailure] = []

        for url in self.rpc_urls:
            self._request_id += 1
            payload = {
                "jsonrpc": "2.0",
                "method": "eth_call",
                "params": [{"to": to, "data": data}, block],
                "id": self._request_id,
            }
            start_ms = now_ms()

            try:
                resp = await client.post(url, json=payload)
                reply = resp.json()
            except httpx.TimeoutException:
                failure = EndpointFailure(url, f"timeout after {now_ms() - start_ms}ms")
            except (httpx.HTTPError, ValueError) as e:
                failure = EndpointFailure(url, str(e) or type(e).__name__)
            else:
                problem = _reply_error(reply)
                if problem is None:
                    self.last_endpoint = url
                    return CallResult(
                        data=reply["result"],
                        endpoint=url,
                        latency_ms=now_ms() - start_ms,
                    )
                failure = EndpointFailure(url, problem)

            failures.append(failure)
            logger.debug(
                "eth_call endpoint failed",
                extra={"context": {"label": label, "to": to, **failure.to_dict()}},
            )

        raise InfraError(
            f"{label} failed on all {len(failures)} endpoints for chain {self.chain_id}",
            code=ErrorCode.INFRA_RPC_ERROR,
            details={
                "chain_id": self.chain_id,
                "label": label,
                "to": to,
                "failures": [f.to_dict() for f in failures],
            },
        )
