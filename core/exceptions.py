# PATH: core/exceptions.py
"""
Typed exceptions for TIERARB.

Every error carries an ErrorCode so callers can tell a clean decline
(pool missing, balance short) apart from a hard abort (swap failure,
unauthorized caller).
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Canonical error codes."""
    # Access
    UNAUTHORIZED = "UNAUTHORIZED"

    # Venue lookups
    POOL_NOT_FOUND = "POOL_NOT_FOUND"

    # Holdings
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"

    # Execution
    VENUE_SWAP_FAILED = "VENUE_SWAP_FAILED"

    # Input / configuration
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"

    # Infrastructure
    INFRA_RPC_ERROR = "INFRA_RPC_ERROR"
    INFRA_DECODE_ERROR = "INFRA_DECODE_ERROR"

    UNKNOWN = "UNKNOWN"


class TierArbError(Exception):
    """Base exception for TIERARB."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str = "",
        code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class UnauthorizedError(TierArbError):
    """Caller is not the designated controller."""
    code = ErrorCode.UNAUTHORIZED


class PoolNotFoundError(TierArbError):
    """No pool deployed for (token_a, token_b, fee_tier)."""
    code = ErrorCode.POOL_NOT_FOUND


class InsufficientBalanceError(TierArbError):
    """Requested input exceeds current holdings."""
    code = ErrorCode.INSUFFICIENT_BALANCE


class VenueSwapError(TierArbError):
    """A swap leg was rejected by the venue."""
    code = ErrorCode.VENUE_SWAP_FAILED


class ValidationError(TierArbError):
    """Input failed validation."""
    code = ErrorCode.VALIDATION_ERROR


class ConfigError(TierArbError):
    """Configuration could not be loaded or is invalid."""
    code = ErrorCode.CONFIG_ERROR


class InfraError(TierArbError):
    """Infrastructure-related errors (RPC, decoding)."""
    code = ErrorCode.INFRA_RPC_ERROR
