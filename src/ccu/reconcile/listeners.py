"""
Host event listeners.

ErrorRecoveryListener watches compiler diagnostics and runs one reset pass
when a compile reports an unresolved type. ReloadListener runs a normal pass
after each module reload, unless that reload cycle already had a reset.
Neither lets an exception escape back into the host's event dispatch.
"""

import logging
import time
from typing import Optional, Sequence

from ccu.host.events import CompilerMessage
from ccu.reconcile.failed_defines import FailedDefinesCache
from ccu.reconcile.reconciler import ReconcileResult, Reconciler
from ccu.reconcile.state import InvalidTransitionError, Phase, Trigger

logger = logging.getLogger(__name__)


class ErrorRecoveryListener:
    """Handles compilation_finished(output_path, messages)."""

    def __init__(
        self,
        reconciler: Reconciler,
        failed_defines: Optional[FailedDefinesCache] = None,
    ):
        self.reconciler = reconciler
        self.failed_defines = failed_defines

    def unresolved_errors(self, messages: Sequence[CompilerMessage]) -> int:
        codes = self.reconciler.config.unresolved_codes
        return sum(1 for m in messages if m.is_error and m.matches_code(codes))

    def __call__(self, output_path: str, messages: Sequence[CompilerMessage]) -> Optional[ReconcileResult]:
        error_count = self.unresolved_errors(messages)
        if error_count == 0:
            return None

        state = self.reconciler.state
        if state.phase is Phase.RESET_PENDING:
            logger.debug(f"[CCU] {error_count} unresolved error(s) in {output_path}, reset already done")
            return None

        try:
            state.lifecycle.fire(Trigger.COMPILE_FAILED)
        except InvalidTransitionError as e:
            logger.warning(f"[CCU] Ignoring compile failure: {e}")
            return None

        defines = state.defines
        if self.failed_defines is not None:
            if self.failed_defines.matches(defines):
                logger.warning(
                    f"[CCU] Defines {';'.join(defines)} failed before, not resetting again"
                )
                return None
            self.failed_defines.save(defines)

        logger.warning(
            f"[CCU] {error_count} unresolved error(s) in {output_path}, removing dependency defines"
        )
        try:
            return self.reconciler.update(reset=True)
        except KeyboardInterrupt:
            raise
        except Exception as e:
            logger.error(f"[CCU] Reset pass failed: {e}")
            return None


class ReloadListener:
    """Handles reload_complete()."""

    def __init__(self, reconciler: Reconciler, reload_delay: float = 0.0):
        self.reconciler = reconciler
        self.reload_delay = reload_delay

    def __call__(self) -> Optional[ReconcileResult]:
        lifecycle = self.reconciler.state.lifecycle
        if lifecycle.phase is Phase.RESET_PENDING:
            lifecycle.fire(Trigger.RELOADED)
            logger.debug("[CCU] Reload after reset, skipping update")
            return None

        try:
            result = self.reconciler.update()
        except InvalidTransitionError as e:
            logger.warning(f"[CCU] Skipping update: {e}")
            return None
        except KeyboardInterrupt:
            raise
        except Exception as e:
            logger.error(f"[CCU] Update failed: {e}")
            return None

        if result.written and self.reload_delay > 0:
            # Let other host subsystems observe the new symbols before reload
            time.sleep(self.reload_delay)
        return result
