"""
TIERARB invocation cycle state machine.

CYCLE STATE CONTRACT:
=====================

States (CycleState):
  IDLE            -> cycle created
  AUTHORIZING     -> checking caller against controller
  LOCATING        -> resolving both fee tiers to pools
  PRICING         -> reading and normalizing both prices
  DECIDING        -> picking a direction
  EXECUTING       -> balance check, leg 1, leg 2
  DECLINED        -> zero output, no swaps            (terminal)
  DONE            -> both legs filled                 (terminal)
  DENIED          -> caller is not the controller     (terminal, abnormal)
  POOL_NOT_FOUND  -> a tier has no pool               (terminal, abnormal)
  FAILED          -> a swap leg failed, rolled back   (terminal, abnormal)

Transitions:
  IDLE        -> AUTHORIZING
  AUTHORIZING -> LOCATING | DENIED
  LOCATING    -> PRICING  | POOL_NOT_FOUND
  PRICING     -> DECIDING
  DECIDING    -> EXECUTING | DECLINED
  EXECUTING   -> DONE | DECLINED | FAILED

=====================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from core.time import now_iso


class CycleState(str, Enum):
    """Decision cycle states."""
    IDLE = "IDLE"
    AUTHORIZING = "AUTHORIZING"
    LOCATING = "LOCATING"
    PRICING = "PRICING"
    DECIDING = "DECIDING"
    EXECUTING = "EXECUTING"
    DECLINED = "DECLINED"
    DONE = "DONE"
    DENIED = "DENIED"
    POOL_NOT_FOUND = "POOL_NOT_FOUND"
    FAILED = "FAILED"


VALID_TRANSITIONS: Dict[CycleState, List[CycleState]] = {
    CycleState.IDLE: [CycleState.AUTHORIZING],
    CycleState.AUTHORIZING: [CycleState.LOCATING, CycleState.DENIED],
    CycleState.LOCATING: [CycleState.PRICING, CycleState.POOL_NOT_FOUND],
    CycleState.PRICING: [CycleState.DECIDING],
    CycleState.DECIDING: [CycleState.EXECUTING, CycleState.DECLINED],
    CycleState.EXECUTING: [CycleState.DONE, CycleState.DECLINED, CycleState.FAILED],
    CycleState.DECLINED: [],  # Terminal state
    CycleState.DONE: [],  # Terminal state
    CycleState.DENIED: [],  # Terminal state
    CycleState.POOL_NOT_FOUND: [],  # Terminal state
    CycleState.FAILED: [],  # Terminal state
}

ABNORMAL_STATES = frozenset({
    CycleState.DENIED,
    CycleState.POOL_NOT_FOUND,
    CycleState.FAILED,
})


@dataclass
class StateTransition:
    """Record of a state transition."""
    from_state: CycleState
    to_state: CycleState
    timestamp: str = ""
    reason: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = now_iso()


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


@dataclass
class CycleStateMachine:
    """
    State machine for one decision cycle.

    Tracks current state and transition history. Discarded with the
    cycle; nothing is carried over between invocations.
    """
    cycle_id: str
    state: CycleState = CycleState.IDLE
    history: List[StateTransition] = field(default_factory=list)

    def can_transition_to(self, new_state: CycleState) -> bool:
        return new_state in VALID_TRANSITIONS.get(self.state, [])

    def transition_to(self, new_state: CycleState, reason: str = "") -> StateTransition:
        """
        Transition to a new state.

        Raises InvalidTransitionError if transition is not valid.
        """
        if not self.can_transition_to(new_state):
            raise InvalidTransitionError(
                f"Cannot transition from {self.state.value} to {new_state.value}. "
                f"Valid transitions: {[s.value for s in VALID_TRANSITIONS.get(self.state, [])]}"
            )

        transition = StateTransition(
            from_state=self.state,
            to_state=new_state,
            reason=reason,
        )
        self.history.append(transition)
        self.state = new_state
        return transition

    @property
    def is_terminal(self) -> bool:
        return len(VALID_TRANSITIONS.get(self.state, [])) == 0

    @property
    def is_abnormal(self) -> bool:
        return self.state in ABNORMAL_STATES

    @property
    def path(self) -> List[CycleState]:
        """States visited, starting from IDLE."""
        return [CycleState.IDLE] + [t.to_state for t in self.history]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cycle_id": self.cycle_id,
            "state": self.state.value,
            "is_terminal": self.is_terminal,
            "is_abnormal": self.is_abnormal,
            "history": [
                {
                    "from_state": t.from_state.value,
                    "to_state": t.to_state.value,
                    "timestamp": t.timestamp,
                    "reason": t.reason,
                }
                for t in self.history
            ],
        }
