"""
execution/access_guard.py - Single-controller authorization.
"""

from core.exceptions import UnauthorizedError
from core.logging import get_logger
from core.validators import same_address, validate_address

logger = get_logger(__name__)

UNAUTHORIZED_MESSAGE = "Only the owner can call this function"


class AccessGuard:
    """
    Allows exactly one controller identity, fixed at construction.

    authorize() runs before any pool lookup or swap and raises on
    anyone else. Denial is never retried.
    """

    def __init__(self, controller: str):
        self._controller = validate_address(controller, "controller")

    @property
    def controller(self) -> str:
        return self._controller

    def is_allowed(self, caller: str) -> bool:
        return isinstance(caller, str) and same_address(caller, self._controller)

    def authorize(self, caller: str) -> None:
        if not self.is_allowed(caller):
            logger.warning(
                "Unauthorized caller",
                extra={"context": {"caller": caller}},
            )
            raise UnauthorizedError(
                UNAUTHORIZED_MESSAGE,
                details={"caller": caller},
            )
