# PATH: core/time.py
"""
Time utilities for TIERARB.
"""

import time
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Get current UTC datetime as ISO string."""
    return now_utc().isoformat()


def now_ms() -> int:
    """Get current Unix timestamp in milliseconds."""
    return int(time.time() * 1000)


def elapsed_ms(start_ms: int) -> int:
    """Milliseconds since start_ms (never negative)."""
    return max(0, now_ms() - start_ms)
