"""Conditional compilation utility.

Keeps a build configuration's symbol list in sync with the optional
dependencies that are currently loaded.
"""

from ccu.host.attributes import Attribute, conditional, declare
from ccu.reconcile import (
    ConditionalCompilationUtility,
    ReconcileResult,
    register_optional_dependency,
)

__version__ = "0.1.0"

__all__ = [
    "Attribute",
    "conditional",
    "declare",
    "ConditionalCompilationUtility",
    "ReconcileResult",
    "register_optional_dependency",
    "__version__",
]
