"""
Reconciliation components.

This module provides:
- Marker type discovery and dependency harvesting
- The dependency registry
- The reconciler and its lifecycle state machine
- Host event listeners and the utility facade
"""

from .discovery import DiscoveryResult, discover_marker_types
from .failed_defines import FailedDefinesCache
from .harvesting import harvest_dependencies
from .listeners import ErrorRecoveryListener, ReloadListener
from .reconciler import ReconcileResult, Reconciler
from .registry import (
    DependencyRegistry,
    OptionalDependency,
    default_registry,
    register_optional_dependency,
)
from .state import InvalidTransitionError, Lifecycle, Phase, ReconciliationState, Trigger
from .utility import ConditionalCompilationUtility

__all__ = [
    "DiscoveryResult",
    "discover_marker_types",
    "FailedDefinesCache",
    "harvest_dependencies",
    "ErrorRecoveryListener",
    "ReloadListener",
    "ReconcileResult",
    "Reconciler",
    "DependencyRegistry",
    "OptionalDependency",
    "default_registry",
    "register_optional_dependency",
    "InvalidTransitionError",
    "Lifecycle",
    "Phase",
    "ReconciliationState",
    "Trigger",
    "ConditionalCompilationUtility",
]
