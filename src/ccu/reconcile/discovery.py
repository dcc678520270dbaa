"""
Marker attribute type discovery.

A marker type is a concrete Attribute subclass, tagged with a conditional
marker whose condition equals the enabling symbol (case-insensitive), that
declares ``dependentClass`` and ``define`` fields. Discovery runs on every
pass because the loaded module set changes between passes.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple

from ccu.host.attributes import Attribute, conditions_of, has_field
from ccu.host.modules import ModuleEnumerator

logger = logging.getLogger(__name__)

DEPENDENT_CLASS_FIELD = "dependentClass"
DEFINE_FIELD = "define"
REQUIRED_FIELDS = (DEPENDENT_CLASS_FIELD, DEFINE_FIELD)


@dataclass(frozen=True)
class DiscoveryResult:
    """
    Outcome of a discovery walk.

    Attributes:
        marker_types: Valid marker types in enumeration order
        rejected: (type, missing field) for tagged types that were excluded
    """

    marker_types: Tuple[type, ...] = ()
    rejected: Tuple[Tuple[type, str], ...] = field(default=())

    @property
    def types(self) -> FrozenSet[type]:
        return frozenset(self.marker_types)


def is_tagged(cls: type, enable_symbol: str) -> bool:
    """Check whether a class carries the conditional marker for enable_symbol."""
    wanted = enable_symbol.casefold()
    return any(condition.casefold() == wanted for condition in conditions_of(cls))


def missing_field(cls: type) -> str:
    """Return the first required string field the class lacks, or an empty string."""
    for name in REQUIRED_FIELDS:
        if not has_field(cls, name):
            return name
    return ""


def discover_marker_types(enumerator: ModuleEnumerator, enable_symbol: str) -> DiscoveryResult:
    """
    Find every marker type across the loaded modules.

    Tagged types missing a required field are logged and excluded; the walk
    continues with the remaining types.

    Args:
        enumerator: Loaded module enumerator
        enable_symbol: Condition string marker types must carry

    Returns:
        DiscoveryResult with valid and rejected types
    """
    rejected: List[Tuple[type, str]] = []

    def predicate(cls: type) -> bool:
        if not is_tagged(cls, enable_symbol):
            return False
        missing = missing_field(cls)
        if missing:
            logger.error(f"[CCU] Attribute type {cls.__name__} missing field: {missing}")
            rejected.append((cls, missing))
            return False
        return True

    marker_types = enumerator.assignable_types(Attribute, predicate)
    logger.debug(f"Discovered {len(marker_types)} marker type(s), rejected {len(rejected)}")
    return DiscoveryResult(marker_types=tuple(marker_types), rejected=tuple(rejected))
