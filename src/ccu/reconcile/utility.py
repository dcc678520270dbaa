"""
Conditional compilation utility facade.

Wires the reconciler, its state and the event listeners together:

    utility = ConditionalCompilationUtility(IniSymbolStore(Path("ccu.ini")))
    utility.install(host_events)
    ...
    if "USE_NUMPY" in utility.defines:
        ...
"""

import logging
from typing import Optional, Tuple

from ccu.config.build_settings import BuildSettings
from ccu.config.settings import CCUConfig
from ccu.config.symbols import SymbolList, SymbolStore
from ccu.host.events import CompilationEvents
from ccu.host.modules import ModuleEnumerator
from ccu.reconcile.failed_defines import FailedDefinesCache
from ccu.reconcile.listeners import ErrorRecoveryListener, ReloadListener
from ccu.reconcile.reconciler import ReconcileResult, Reconciler
from ccu.reconcile.registry import DependencyRegistry, default_registry
from ccu.reconcile.state import ReconciliationState

logger = logging.getLogger(__name__)


class ConditionalCompilationUtility:
    """Adds build defines while their optional dependencies are loaded."""

    def __init__(
        self,
        store: SymbolStore,
        settings: Optional[BuildSettings] = None,
        config: Optional[CCUConfig] = None,
        enumerator: Optional[ModuleEnumerator] = None,
        registry: Optional[DependencyRegistry] = None,
    ):
        """
        Initialize the utility.

        Args:
            store: Persistent symbol store
            settings: Host build settings
            config: Utility configuration
            enumerator: Loaded module enumerator (defaults to sys.modules)
            registry: Dependency registry (defaults to the process-wide one)
        """
        self.config = config or CCUConfig()
        self.state = ReconciliationState()
        self.reconciler = Reconciler(
            store,
            settings=settings,
            state=self.state,
            enumerator=enumerator,
            registry=registry if registry is not None else default_registry,
            config=self.config,
        )

        failed_defines = None
        if self.config.failed_defines_path is not None:
            failed_defines = FailedDefinesCache(self.config.failed_defines_path)
        self.error_listener = ErrorRecoveryListener(self.reconciler, failed_defines)
        self.reload_listener = ReloadListener(self.reconciler, self.config.reload_delay)
        self._events: Optional[CompilationEvents] = None

    @property
    def enabled(self) -> bool:
        """True if the enabling symbol is in the current group's symbols."""
        group = self.reconciler.resolve_group()
        symbols = SymbolList.parse(self.reconciler.store.get_symbols(group))
        return symbols.contains(self.config.enable_symbol)

    @property
    def defines(self) -> Tuple[str, ...]:
        return self.state.defines

    def update(self, reset: bool = False) -> ReconcileResult:
        """Run one reconciliation pass directly. See Reconciler.update."""
        return self.reconciler.update(reset=reset)

    def install(self, events: CompilationEvents) -> None:
        """Connect the listeners to the host's compilation events."""
        if self._events is not None:
            self.uninstall()
        events.compilation_finished.connect(self.error_listener)
        events.reload_complete.connect(self.reload_listener)
        self._events = events
        logger.debug("[CCU] Listeners installed")

    def uninstall(self) -> None:
        if self._events is None:
            return
        self._events.compilation_finished.disconnect(self.error_listener)
        self._events.reload_complete.disconnect(self.reload_listener)
        self._events = None
