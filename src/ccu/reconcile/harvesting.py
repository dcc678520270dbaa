"""
Dependency harvesting.

Builds the ``dependent class -> define`` mapping for one pass from marker
attribute instances declared at module level, followed by entries from the
dependency registry. The mapping is rebuilt from scratch every pass.
"""

import logging
from types import ModuleType
from typing import Any, Collection, Dict, Optional

from ccu.host.attributes import module_attributes
from ccu.host.modules import ModuleEnumerator, ModuleLoadError
from ccu.reconcile.discovery import DEFINE_FIELD, DEPENDENT_CLASS_FIELD
from ccu.reconcile.registry import DependencyRegistry

logger = logging.getLogger(__name__)


def _record(dependencies: Dict[str, str], dependent_class: Any, define: Any) -> bool:
    # First write wins; non-string or empty values are ignored.
    if not isinstance(dependent_class, str) or not isinstance(define, str):
        return False
    if not dependent_class or not define or dependent_class in dependencies:
        return False
    dependencies[dependent_class] = define
    return True


def harvest_dependencies(
    enumerator: ModuleEnumerator,
    marker_types: Collection[type],
    registry: Optional[DependencyRegistry] = None,
) -> Dict[str, str]:
    """
    Collect optional dependency declarations.

    Only attribute instances whose exact type is a discovered marker type
    contribute. Field values are read by name.

    Args:
        enumerator: Loaded module enumerator
        marker_types: Types returned by discovery
        registry: Optional registry whose records are merged after the scan

    Returns:
        Ordered mapping of dependent class name to define
    """
    markers = set(marker_types)
    dependencies: Dict[str, str] = {}

    def visit(module: ModuleType) -> None:
        try:
            attributes = module_attributes(module)
        except TypeError as e:
            raise ModuleLoadError(str(getattr(module, "__name__", repr(module))), str(e)) from e
        for attribute in attributes:
            if type(attribute) not in markers:
                continue
            dependent_class = getattr(attribute, DEPENDENT_CLASS_FIELD, None)
            define = getattr(attribute, DEFINE_FIELD, None)
            _record(dependencies, dependent_class, define)

    if markers:
        enumerator.for_each_module(visit)

    if registry is not None:
        for record in registry:
            _record(dependencies, record.dependent_class, record.define)

    logger.debug(f"Harvested {len(dependencies)} optional dependency declaration(s)")
    return dependencies
