"""
Process-wide registry of optional dependency declarations.

Declaring code registers ``(dependent class, define)`` pairs at import time
instead of attaching marker attributes to its module:

    from ccu import register_optional_dependency

    register_optional_dependency("numpy.ndarray", "USE_NUMPY")
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionalDependency:
    """
    A single optional dependency declaration.

    Attributes:
        dependent_class: Fully qualified name of the class that must be loaded
        define: Build symbol to enable while that class is present
    """

    dependent_class: str
    define: str

    def __post_init__(self) -> None:
        if not self.dependent_class:
            raise ValueError("dependent_class must not be empty")
        if not self.define:
            raise ValueError("define must not be empty")


class DependencyRegistry:
    """Ordered collection of optional dependencies, keyed by dependent class."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[str, OptionalDependency] = {}

    def register(self, dependent_class: str, define: str) -> OptionalDependency:
        """
        Register an optional dependency.

        The first registration for a dependent class wins; later ones are
        ignored and the existing record is returned.

        Raises:
            ValueError: If either argument is empty
        """
        record = OptionalDependency(dependent_class, define)
        with self._lock:
            existing = self._records.get(dependent_class)
            if existing is not None:
                if existing.define != define:
                    logger.debug(f"Ignoring duplicate registration for {dependent_class} ({define})")
                return existing
            self._records[dependent_class] = record
        return record

    def unregister(self, dependent_class: str) -> None:
        with self._lock:
            self._records.pop(dependent_class, None)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def records(self) -> List[OptionalDependency]:
        with self._lock:
            return list(self._records.values())

    def __iter__(self) -> Iterator[OptionalDependency]:
        return iter(self.records())

    def __len__(self) -> int:
        return len(self._records)


default_registry = DependencyRegistry()


def register_optional_dependency(dependent_name: str, define: str) -> OptionalDependency:
    """Register an optional dependency in the process-wide registry."""
    return default_registry.register(dependent_name, define)
