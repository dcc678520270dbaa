"""
Reconciliation lifecycle and published state.

The lifecycle is a small state machine driven by the reconciler and the
event listeners:

    IDLE ----------------- BEGIN ----------> RECONCILING
    RECONCILING ---------- FINISHED -------> IDLE
    RECONCILING ---------- BOOTSTRAPPED ---> AWAITING_BOOTSTRAP_RECOMPILE
    RECONCILING ---------- RESET_FINISHED -> RESET_PENDING
    RECONCILING ---------- ABORTED --------> IDLE
    IDLE / AWAITING ------ COMPILE_FAILED -> RESET_PENDING
    AWAITING ------------- BEGIN ----------> RECONCILING
    RESET_PENDING -------- BEGIN ----------> RECONCILING
    RESET_PENDING -------- RELOADED -------> IDLE

There is no BEGIN edge out of RECONCILING, so a pass can never start while
another one is running.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Lifecycle phase."""

    IDLE = "idle"
    AWAITING_BOOTSTRAP_RECOMPILE = "awaiting_bootstrap_recompile"
    RECONCILING = "reconciling"
    RESET_PENDING = "reset_pending"


class Trigger(Enum):
    """Lifecycle event."""

    BEGIN = "begin"
    FINISHED = "finished"
    BOOTSTRAPPED = "bootstrapped"
    RESET_FINISHED = "reset_finished"
    ABORTED = "aborted"
    COMPILE_FAILED = "compile_failed"
    RELOADED = "reloaded"


TRANSITIONS: Dict[Tuple[Phase, Trigger], Phase] = {
    (Phase.IDLE, Trigger.BEGIN): Phase.RECONCILING,
    (Phase.IDLE, Trigger.COMPILE_FAILED): Phase.RESET_PENDING,
    (Phase.AWAITING_BOOTSTRAP_RECOMPILE, Trigger.BEGIN): Phase.RECONCILING,
    (Phase.AWAITING_BOOTSTRAP_RECOMPILE, Trigger.COMPILE_FAILED): Phase.RESET_PENDING,
    (Phase.RECONCILING, Trigger.FINISHED): Phase.IDLE,
    (Phase.RECONCILING, Trigger.BOOTSTRAPPED): Phase.AWAITING_BOOTSTRAP_RECOMPILE,
    (Phase.RECONCILING, Trigger.RESET_FINISHED): Phase.RESET_PENDING,
    (Phase.RECONCILING, Trigger.ABORTED): Phase.IDLE,
    (Phase.RESET_PENDING, Trigger.BEGIN): Phase.RECONCILING,
    (Phase.RESET_PENDING, Trigger.RELOADED): Phase.IDLE,
}


class InvalidTransitionError(Exception):
    """Raised when a trigger is not allowed in the current phase."""

    def __init__(self, phase: Phase, trigger: Trigger):
        self.phase = phase
        self.trigger = trigger
        super().__init__(f"Cannot apply {trigger.value} while {phase.value}")


class Lifecycle:
    """Tracks the current phase and applies transitions from TRANSITIONS."""

    def __init__(self, phase: Phase = Phase.IDLE):
        self._phase = phase

    @property
    def phase(self) -> Phase:
        return self._phase

    def can_fire(self, trigger: Trigger) -> bool:
        return (self._phase, trigger) in TRANSITIONS

    def fire(self, trigger: Trigger) -> Phase:
        """
        Apply a trigger.

        Returns:
            The new phase

        Raises:
            InvalidTransitionError: If the trigger is not allowed now
        """
        target = TRANSITIONS.get((self._phase, trigger))
        if target is None:
            raise InvalidTransitionError(self._phase, trigger)
        logger.debug(f"Lifecycle {self._phase.value} --{trigger.value}--> {target.value}")
        self._phase = target
        return target


class ReconciliationState:
    """
    State owned by one utility instance.

    The active define set is written only through publish(), which the
    reconciler calls once per pass. Everyone else reads ``defines``.
    """

    def __init__(self, lifecycle: Optional[Lifecycle] = None):
        self.lifecycle = lifecycle or Lifecycle()
        self._defines: Tuple[str, ...] = ()
        self.passes = 0

    @property
    def defines(self) -> Tuple[str, ...]:
        """Most recently published active defines, enabling symbol first."""
        return self._defines

    @property
    def phase(self) -> Phase:
        return self.lifecycle.phase

    def publish(self, defines: Iterable[str]) -> None:
        self._defines = tuple(defines)
        self.passes += 1
