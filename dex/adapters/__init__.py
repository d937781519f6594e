"""
dex/adapters/ - Venue adapters.

Adapters:
- uniswap_v3: read-only Uniswap V3 venue over JSON-RPC
- paper: in-memory venue (factory + router + ERC20 ledger)
"""

from dex.adapters.paper import (
    PaperPool,
    PaperVenue,
    SwapCall,
    build_paper_venue,
)
from dex.adapters.uniswap_v3 import (
    UniswapV3Reader,
)

__all__ = [
    "PaperPool",
    "PaperVenue",
    "SwapCall",
    "build_paper_venue",
    "UniswapV3Reader",
]
