"""
TIERARB execution layer.

- access_guard: single-controller authorization
- state_machine: per-cycle state tracking
- swap_executor: atomic two-leg swap pipeline
- engine: execute_arbitrage / get_price invocation surface
"""

from execution.access_guard import AccessGuard, UNAUTHORIZED_MESSAGE
from execution.engine import ArbitrageEngine
from execution.state_machine import (
    CycleState,
    CycleStateMachine,
    StateTransition,
    InvalidTransitionError,
    VALID_TRANSITIONS,
)
from execution.swap_executor import SwapExecutor, SwapResult

__all__ = [
    # Guard
    "AccessGuard",
    "UNAUTHORIZED_MESSAGE",
    # Engine
    "ArbitrageEngine",
    # State machine
    "CycleState",
    "CycleStateMachine",
    "StateTransition",
    "InvalidTransitionError",
    "VALID_TRANSITIONS",
    # Executor
    "SwapExecutor",
    "SwapResult",
]
