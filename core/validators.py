"""
Validators for TIERARB.

Boundary checks for configuration values: addresses, fee tiers and
token decimals. Each validator returns the normalized value or raises
ValidationError.
"""

import re
from typing import Any

from core.constants import MAX_FEE_TIER
from core.exceptions import ValidationError

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_address(value: Any, field_name: str = "address") -> str:
    """
    Validate a 20-byte hex address.

    Checksum casing is preserved; comparisons elsewhere are
    case-insensitive.
    """
    if not isinstance(value, str) or not ADDRESS_PATTERN.match(value):
        raise ValidationError(
            f"Invalid {field_name}: {value!r}",
            details={"field": field_name, "value": repr(value)},
        )
    return value


def same_address(a: str, b: str) -> bool:
    """Case-insensitive address equality."""
    return a.lower() == b.lower()


def validate_fee_tier(value: Any, field_name: str = "fee_tier") -> int:
    """Fee tier must be an int in [0, 2^24)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{field_name} must be an int, got {type(value).__name__}",
            details={"field": field_name, "value": repr(value)},
        )
    if value < 0 or value >= MAX_FEE_TIER:
        raise ValidationError(
            f"{field_name} out of range: {value}",
            details={"field": field_name, "value": value},
        )
    return value


def validate_decimals(value: Any, field_name: str = "decimals") -> int:
    """Token decimals must fit a uint8."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
        raise ValidationError(
            f"Invalid {field_name}: {value!r}",
            details={"field": field_name, "value": repr(value)},
        )
    return value
