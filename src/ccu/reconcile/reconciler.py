"""
Symbol list reconciliation.

One pass ("update") runs these stages in order:

1. Resolve the build target group and read its symbol list
2. Bootstrap: if the enabling symbol is missing, add it, write, and stop;
   marker types only become visible after the recompile that write causes
3. Discover marker types and harvest dependency declarations
4. Resolve each dependent class against the loaded modules and add the
   defines that are satisfied
5. Remove defines whose dependent class no longer resolves
6. In reset mode, remove every harvested define
7. Publish the active define set
8. Write the symbol list back only if it changed
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ccu.config.build_settings import BuildSettings, BuildTargetGroup, resolve_group
from ccu.config.settings import CCUConfig
from ccu.config.symbols import SymbolList, SymbolStore
from ccu.host.modules import ModuleEnumerator
from ccu.reconcile.discovery import DiscoveryResult, discover_marker_types
from ccu.reconcile.harvesting import harvest_dependencies
from ccu.reconcile.registry import DependencyRegistry
from ccu.reconcile.state import ReconciliationState, Trigger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    """
    Outcome of a single pass.

    Attributes:
        group: Build target group the pass operated on
        original: Symbol string read at the start of the pass
        symbols: Symbol string after the pass
        defines: Published active defines
        dependencies: Harvested dependent class -> define mapping
        resolved: Dependent classes that resolved this pass
        bootstrapped: True if the pass only added the enabling symbol
        written: True if the symbol store was written
        reset: True if the pass ran in reset mode
    """

    group: BuildTargetGroup
    original: str
    symbols: str
    defines: Tuple[str, ...]
    dependencies: Dict[str, str] = field(default_factory=dict)
    resolved: Tuple[str, ...] = ()
    bootstrapped: bool = False
    written: bool = False
    reset: bool = False


class Reconciler:
    """Runs reconciliation passes against a symbol store."""

    def __init__(
        self,
        store: SymbolStore,
        settings: Optional[BuildSettings] = None,
        state: Optional[ReconciliationState] = None,
        enumerator: Optional[ModuleEnumerator] = None,
        registry: Optional[DependencyRegistry] = None,
        config: Optional[CCUConfig] = None,
    ):
        """
        Initialize the reconciler.

        Args:
            store: Persistent symbol store
            settings: Host build settings (defaults to an UNKNOWN selection)
            state: State object the pass publishes into
            enumerator: Loaded module enumerator (defaults to sys.modules)
            registry: Dependency registry merged into harvesting
            config: Utility configuration
        """
        self.store = store
        self.settings = settings or BuildSettings()
        self.state = state or ReconciliationState()
        self.enumerator = enumerator or ModuleEnumerator()
        self.registry = registry
        self.config = config or CCUConfig()
        self.last_discovery: Optional[DiscoveryResult] = None

    @property
    def enable_symbol(self) -> str:
        return self.config.enable_symbol

    def resolve_group(self) -> BuildTargetGroup:
        if self.config.group is not None:
            return self.config.group
        return resolve_group(self.settings)

    def update(self, reset: bool = False) -> ReconcileResult:
        """
        Run one reconciliation pass.

        Args:
            reset: Strip every harvested define instead of resolving them

        Returns:
            ReconcileResult describing the pass

        Raises:
            InvalidTransitionError: If a pass is already running
            SymbolStoreError: If the symbol store cannot be read or written
        """
        lifecycle = self.state.lifecycle
        lifecycle.fire(Trigger.BEGIN)
        try:
            result = self._run(reset)
        except BaseException:
            lifecycle.fire(Trigger.ABORTED)
            raise

        if result.bootstrapped:
            lifecycle.fire(Trigger.BOOTSTRAPPED)
        elif reset:
            lifecycle.fire(Trigger.RESET_FINISHED)
        else:
            lifecycle.fire(Trigger.FINISHED)
        return result

    def _run(self, reset: bool) -> ReconcileResult:
        group = self.resolve_group()
        original = self.store.get_symbols(group)
        symbols = SymbolList.parse(original)
        enable = self.enable_symbol

        if not symbols.contains(enable):
            symbols.add(enable)
            joined = symbols.join()
            logger.info(f"[CCU] Adding {enable} to {group.value}; dependencies resolve after recompile")
            self.state.publish([enable])
            self.store.set_symbols(group, joined)
            return ReconcileResult(
                group=group,
                original=original,
                symbols=joined,
                defines=self.state.defines,
                bootstrapped=True,
                written=True,
                reset=reset,
            )

        self.last_discovery = discover_marker_types(self.enumerator, enable)
        dependencies = harvest_dependencies(
            self.enumerator, self.last_discovery.types, self.registry
        )

        active = SymbolList([enable])
        resolved: List[str] = []
        for dependent_class, define in dependencies.items():
            if self.enumerator.find_type(dependent_class) is None:
                logger.debug(f"[CCU] {dependent_class} not loaded, {define} inactive")
                continue
            resolved.append(dependent_class)
            if symbols.add(define):
                logger.info(f"[CCU] {dependent_class} found, enabling {define}")
            active.add(define)

        for define in dependencies.values():
            if define in active or define.casefold() == enable.casefold():
                continue
            if symbols.remove(define):
                logger.info(f"[CCU] Dependency for {define} no longer loaded, removing it")

        if reset:
            for define in dependencies.values():
                if define.casefold() != enable.casefold():
                    symbols.remove(define)
            active = SymbolList([enable])
            logger.warning(f"[CCU] Reset: removed all dependency defines from {group.value}")

        self.state.publish(active)

        joined = symbols.join()
        written = joined != original
        if written:
            self.store.set_symbols(group, joined)
        else:
            logger.debug(f"[CCU] Symbols for {group.value} unchanged")

        return ReconcileResult(
            group=group,
            original=original,
            symbols=joined,
            defines=self.state.defines,
            dependencies=dict(dependencies),
            resolved=tuple(resolved),
            written=written,
            reset=reset,
        )
