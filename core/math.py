# PATH: core/math.py
"""
Integer math for TIERARB.

No float money: every price and amount is an int in its native
fixed-point scale. Floats are rejected at the boundary so comparisons
between tiers are exact and reproducible.
"""

from decimal import Decimal
from math import isqrt
from typing import Any, Union

from core.constants import BPS_DENOMINATOR, PRICE_SCALE, Q192
from core.exceptions import ValidationError


def validate_no_float(*values: Any) -> None:
    """
    Raise ValidationError if any value is a float.

    Args:
        *values: Values to check (None is allowed)
    """
    for value in values:
        if isinstance(value, float):
            raise ValidationError(
                "Float values are not allowed in price math",
                details={"value": repr(value)},
            )


def safe_int(value: Union[int, str, Decimal], name: str = "value") -> int:
    """
    Convert to int without going through float.

    Accepts int, decimal strings and Decimal (truncated toward zero).
    bool and float are rejected.
    """
    validate_no_float(value)
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        return int(value)
    if isinstance(value, str):
        text = value.strip().replace("_", "")
        try:
            return int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError:
            raise ValidationError(f"{name} is not an integer: {value!r}")
    raise ValidationError(f"{name} must be an integer, got {type(value).__name__}")


def require_non_negative_int(value: Any, name: str) -> int:
    """Return value if it is a non-negative int, else raise ValidationError."""
    if isinstance(value, bool) or not isinstance(value, int):
        validate_no_float(value)
        raise ValidationError(
            f"{name} must be an int, got {type(value).__name__}",
            details={name: repr(value)},
        )
    if value < 0:
        raise ValidationError(
            f"{name} must be non-negative",
            details={name: value},
        )
    return value


# =============================================================================
# PRICE CONVERSION
# =============================================================================

def normalize_sqrt_price_x96(sqrt_price_x96: int) -> int:
    """
    Convert a venue sqrtPriceX96 into a linear price with 18 decimals.

        price = sqrt_price_x96 ** 2 * 10**18 // 2**192

    Squaring and scaling happen before the single truncating division,
    so the only precision lost is the final floor. Zero (no liquidity)
    maps to zero.

    Raises:
        ValidationError: negative, float or non-int input
    """
    raw = require_non_negative_int(sqrt_price_x96, "sqrt_price_x96")
    return (raw * raw * PRICE_SCALE) // Q192


def price_to_sqrt_price_x96(price: int) -> int:
    """
    Inverse of normalize_sqrt_price_x96 (floor).

    For any normalized price p:
        normalize_sqrt_price_x96(price_to_sqrt_price_x96(p)) <= p
    """
    p = require_non_negative_int(price, "price")
    return isqrt(p * Q192 // PRICE_SCALE)


def human_price_to_sqrt_price_x96(price: Union[int, str, Decimal]) -> int:
    """Seed helper: '2500.5' -> sqrtPriceX96 (used by the paper venue)."""
    validate_no_float(price)
    scaled = Decimal(str(price)) * PRICE_SCALE
    if scaled < 0:
        raise ValidationError("price must be non-negative", details={"price": str(price)})
    return price_to_sqrt_price_x96(int(scaled))


# =============================================================================
# UNITS
# =============================================================================

def wei_to_human(amount_wei: int, decimals: int) -> Decimal:
    """Smallest units -> token units (display only)."""
    if decimals < 0 or decimals > 255:
        raise ValidationError(f"Invalid decimals: {decimals}")
    return Decimal(safe_int(amount_wei, "amount_wei")) / (Decimal(10) ** decimals)


def human_to_wei(amount: Union[int, str, Decimal], decimals: int) -> int:
    """Token units -> smallest units (truncates)."""
    validate_no_float(amount)
    if decimals < 0 or decimals > 255:
        raise ValidationError(f"Invalid decimals: {decimals}")
    return int(Decimal(str(amount)) * (Decimal(10) ** decimals))


def calculate_bps_diff(value: int, base: int) -> int:
    """
    Integer basis-point difference of value relative to base.

    Zero base returns zero.
    """
    if base == 0:
        return 0
    return (value - base) * BPS_DENOMINATOR // base
