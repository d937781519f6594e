"""
core - Core utilities and models for TIERARB.

This package contains:
- models.py: Data models (Token, PoolHandle, LegFill, ArbitrageOutcome, ArbitrageConfig)
- constants.py: Fixed-point scales and enums
- exceptions.py: Typed exceptions with error codes
- math.py: Integer price conversion (no float)
- time.py: Clock helpers
- validators.py: Address / fee tier / decimals checks
- logging.py: Structured JSON logging
"""

from core.constants import (
    DeclineReason,
    Direction,
    OutcomeStatus,
    PRICE_SCALE,
    Q96,
    Q192,
    SwapLeg,
    V3_FEE_TIERS,
)
from core.exceptions import (
    ConfigError,
    ErrorCode,
    InfraError,
    InsufficientBalanceError,
    PoolNotFoundError,
    TierArbError,
    UnauthorizedError,
    ValidationError,
    VenueSwapError,
)
from core.logging import get_logger, setup_logging
from core.math import normalize_sqrt_price_x96, price_to_sqrt_price_x96
from core.models import (
    ArbitrageConfig,
    ArbitrageOutcome,
    LegFill,
    PoolHandle,
    Route,
    Token,
)

__all__ = [
    # Constants
    "DeclineReason",
    "Direction",
    "OutcomeStatus",
    "PRICE_SCALE",
    "Q96",
    "Q192",
    "SwapLeg",
    "V3_FEE_TIERS",
    # Exceptions
    "ConfigError",
    "ErrorCode",
    "InfraError",
    "InsufficientBalanceError",
    "PoolNotFoundError",
    "TierArbError",
    "UnauthorizedError",
    "ValidationError",
    "VenueSwapError",
    # Math
    "normalize_sqrt_price_x96",
    "price_to_sqrt_price_x96",
    # Models
    "ArbitrageConfig",
    "ArbitrageOutcome",
    "LegFill",
    "PoolHandle",
    "Route",
    "Token",
    # Logging
    "get_logger",
    "setup_logging",
]
