# PATH: core/constants.py
"""
Constants for TIERARB.

Contains fixed-point scales, fee tiers and the enums shared across
the decision cycle.
"""

from enum import Enum
from typing import Final, List

# =============================================================================
# FIXED-POINT SCALES
# =============================================================================

# sqrtPriceX96 is sqrt(price) * 2^96
Q96: Final[int] = 2 ** 96
Q192: Final[int] = 2 ** 192

# Normalized prices carry 18 decimals
PRICE_DECIMALS: Final[int] = 18
PRICE_SCALE: Final[int] = 10 ** PRICE_DECIMALS

# uint24 upper bound for fee identifiers
MAX_FEE_TIER: Final[int] = 2 ** 24

# uint160 upper bound for sqrtPriceX96
MAX_SQRT_PRICE_X96: Final[int] = 2 ** 160 - 1

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

# V3 fee tiers (in hundredths of a bip)
V3_FEE_TIERS: List[int] = [100, 500, 3000, 10000]

BPS_DENOMINATOR: Final[int] = 10_000
FEE_DENOMINATOR: Final[int] = 1_000_000


class Direction(str, Enum):
    """Which configured tier is bought through on leg 1."""
    BUY_A_SELL_B = "BUY_A_SELL_B"
    BUY_B_SELL_A = "BUY_B_SELL_A"
    NO_OPPORTUNITY = "NO_OPPORTUNITY"


class OutcomeStatus(str, Enum):
    """Terminal result of one decision cycle."""
    EXECUTED = "EXECUTED"
    DECLINED = "DECLINED"


class DeclineReason(str, Enum):
    """Why a cycle ended with zero output and no swaps."""
    POOL_NOT_FOUND = "POOL_NOT_FOUND"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    NO_OPPORTUNITY = "NO_OPPORTUNITY"


class SwapLeg(str, Enum):
    """Leg identifiers for the two-step swap pipeline."""
    BUY = "BUY"
    SELL = "SELL"
