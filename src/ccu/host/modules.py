"""
Loaded module enumeration and type resolution.

This module handles:
- Snapshotting the set of currently loaded modules
- Visiting each module with a callback, skipping modules that fail to load
- Listing the classes a module defines
- Resolving qualified class names without importing anything
"""

import inspect
import logging
import sys
from types import ModuleType
from typing import Any, Callable, Iterable, Iterator, List, Optional

from .attributes import is_concrete

logger = logging.getLogger(__name__)


class ModuleLoadError(Exception):
    """Raised when the classes of a loaded module cannot be enumerated."""

    def __init__(self, module_name: str, reason: str):
        self.module_name = module_name
        self.reason = reason
        super().__init__(f"Failed to load types from {module_name}: {reason}")


def module_types(module: ModuleType) -> List[type]:
    """
    List the classes defined by a module, nested classes included.

    Only classes whose ``__module__`` is the module itself are returned, so
    re-exported names do not show up twice.

    Args:
        module: Loaded module

    Returns:
        Classes in definition order

    Raises:
        ModuleLoadError: If the module namespace cannot be read
    """
    module_name = getattr(module, "__name__", None)
    if not isinstance(module_name, str):
        raise ModuleLoadError(repr(module), "module has no name")

    try:
        namespace = dict(vars(module))
    except Exception as e:
        raise ModuleLoadError(module_name, str(e)) from e

    found: List[type] = []
    pending = [v for v in namespace.values() if inspect.isclass(v)]
    while pending:
        cls = pending.pop(0)
        if cls in found or getattr(cls, "__module__", None) != module_name:
            continue
        found.append(cls)
        pending.extend(v for v in vars(cls).values() if inspect.isclass(v))
    return found


def resolve_type(module: ModuleType, qualified_name: str) -> Optional[type]:
    """
    Resolve a qualified class name against a single module.

    Accepts ``"pkg.mod.Class"`` and ``"pkg.mod:Class.Inner"``. Lookups walk
    namespaces directly, so lazy module ``__getattr__`` hooks never fire and
    nothing gets imported.

    Args:
        module: Module to resolve against
        qualified_name: Fully qualified class name

    Returns:
        The class, or None if the name is not rooted in this module or does
        not name a class
    """
    module_name = getattr(module, "__name__", None)
    if not isinstance(module_name, str) or not qualified_name:
        return None

    if ":" in qualified_name:
        prefix, _, attr_path = qualified_name.partition(":")
        if prefix != module_name:
            return None
    elif qualified_name.startswith(module_name + "."):
        attr_path = qualified_name[len(module_name) + 1:]
    else:
        return None

    target: Any = module
    for part in attr_path.split("."):
        namespace = getattr(target, "__dict__", None)
        if not part or namespace is None or part not in namespace:
            return None
        target = namespace[part]

    return target if inspect.isclass(target) else None


class ModuleEnumerator:
    """
    Visits every loaded module.

    By default the enumerator snapshots ``sys.modules`` on each walk, so a
    module set that changes between passes is picked up automatically. Hosts
    and tests can pin an explicit module sequence instead.

    Usage:
        enumerator = ModuleEnumerator()
        enumerator.for_each_module(lambda m: print(m.__name__))
    """

    def __init__(self, modules: Optional[Iterable[ModuleType]] = None):
        """
        Initialize the enumerator.

        Args:
            modules: Explicit modules to walk (defaults to sys.modules)
        """
        self._modules = list(modules) if modules is not None else None

    def modules(self) -> List[ModuleType]:
        """Return the current module snapshot."""
        if self._modules is not None:
            return list(self._modules)
        return [m for m in list(sys.modules.values()) if m is not None]

    def for_each_module(self, callback: Callable[[ModuleType], None]) -> None:
        """
        Apply a callback to every module.

        A module whose callback raises ModuleLoadError is skipped; the walk
        continues with the remaining modules.

        Args:
            callback: Function called once per module
        """
        for module in self.modules():
            try:
                callback(module)
            except ModuleLoadError as e:
                logger.debug(f"Skipping module: {e}")
                continue

    def iter_types(self) -> Iterator[type]:
        """Yield every class defined by every loadable module."""
        collected: List[type] = []
        self.for_each_module(lambda module: collected.extend(module_types(module)))
        yield from collected

    def assignable_types(
        self,
        base: type,
        predicate: Optional[Callable[[type], bool]] = None,
    ) -> List[type]:
        """
        Find concrete subclasses of a base class across all modules.

        Args:
            base: Base class the results must be assignable to
            predicate: Optional extra filter

        Returns:
            Matching classes in enumeration order
        """
        result = []
        for cls in self.iter_types():
            if not issubclass(cls, base) or not is_concrete(cls):
                continue
            if predicate is None or predicate(cls):
                result.append(cls)
        return result

    def find_type(self, qualified_name: str) -> Optional[type]:
        """
        Resolve a qualified class name against every module.

        Args:
            qualified_name: Fully qualified class name

        Returns:
            The class from the first module it resolves in, or None
        """
        for module in self.modules():
            found = resolve_type(module, qualified_name)
            if found is not None:
                return found
        return None
