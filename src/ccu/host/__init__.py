"""Host-side primitives consumed by the conditional compilation utility.

This module provides the pieces a host runtime supplies:
- Attribute base class and conditional marker decorator
- Module enumeration and type resolution
- Compilation and reload event signals
"""

from .attributes import (
    Attribute,
    conditional,
    conditions_of,
    declare,
    has_field,
    is_concrete,
    module_attributes,
)
from .events import CompilationEvents, CompilerMessage, MessageSeverity, Signal
from .modules import ModuleEnumerator, ModuleLoadError, resolve_type

__all__ = [
    "Attribute",
    "conditional",
    "conditions_of",
    "declare",
    "has_field",
    "is_concrete",
    "module_attributes",
    "CompilationEvents",
    "CompilerMessage",
    "MessageSeverity",
    "Signal",
    "ModuleEnumerator",
    "ModuleLoadError",
    "resolve_type",
]
