"""Configuration modules for the conditional compilation utility."""

from .build_settings import BuildSettings, BuildTargetGroup, resolve_group
from .settings import CCUConfig, CCUConfigError
from .symbols import (
    InMemorySymbolStore,
    IniSymbolStore,
    SymbolList,
    SymbolStore,
    SymbolStoreError,
)

__all__ = [
    "BuildSettings",
    "BuildTargetGroup",
    "resolve_group",
    "CCUConfig",
    "CCUConfigError",
    "InMemorySymbolStore",
    "IniSymbolStore",
    "SymbolList",
    "SymbolStore",
    "SymbolStoreError",
]
