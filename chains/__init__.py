"""
chains/ - Blockchain interaction layer.

Modules:
- providers: eth_call transport with endpoint failover
"""

from chains.providers import (
    CallResult,
    EndpointFailure,
    RPCProvider,
    resolve_rpc_urls,
)

__all__ = [
    "CallResult",
    "EndpointFailure",
    "RPCProvider",
    "resolve_rpc_urls",
]
