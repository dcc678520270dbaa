"""
Project symbol lists and their persistent stores.

A symbol list is the ordered set of build symbols for one build target
group, persisted as a single ``;``-joined string. Membership is
case-insensitive, storage is case-preserving.

Example:
    store = IniSymbolStore(Path("ccu.ini"))
    symbols = SymbolList.parse(store.get_symbols(BuildTargetGroup.STANDALONE))
    symbols.add("USE_NUMPY")
    store.set_symbols(BuildTargetGroup.STANDALONE, symbols.join())
"""

import configparser
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ccu.config.build_settings import BuildTargetGroup
from ccu.host.events import Signal

logger = logging.getLogger(__name__)

SEPARATOR = ";"


class SymbolStoreError(Exception):
    """Raised when a symbol store cannot be read or written."""

    pass


class SymbolList:
    """Ordered, case-insensitively distinct list of build symbols."""

    def __init__(self, symbols: Iterable[str] = ()):
        self._symbols: List[str] = []
        for symbol in symbols:
            self.add(symbol)

    @classmethod
    def parse(cls, joined: Optional[str]) -> "SymbolList":
        """
        Parse a ``;``-joined symbol string.

        Empty tokens and surrounding whitespace are dropped, and later
        case-insensitive duplicates are ignored.

        Example:
            >>> SymbolList.parse("FOO;;foo;BAR").join()
            'FOO;BAR'
        """
        if not joined:
            return cls()
        return cls(token.strip() for token in joined.split(SEPARATOR) if token.strip())

    def join(self) -> str:
        return SEPARATOR.join(self._symbols)

    def contains(self, symbol: str) -> bool:
        """Case-insensitive membership test."""
        folded = symbol.casefold()
        return any(s.casefold() == folded for s in self._symbols)

    def add(self, symbol: str) -> bool:
        """Append a symbol if absent. Returns True if it was added."""
        if not symbol or self.contains(symbol):
            return False
        self._symbols.append(symbol)
        return True

    def remove(self, symbol: str) -> bool:
        """Remove a symbol (case-insensitive match). Returns True if removed."""
        folded = symbol.casefold()
        for i, existing in enumerate(self._symbols):
            if existing.casefold() == folded:
                del self._symbols[i]
                return True
        return False

    def copy(self) -> "SymbolList":
        return SymbolList(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.contains(symbol)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._symbols))

    def __len__(self) -> int:
        return len(self._symbols)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymbolList):
            return NotImplemented
        return self._symbols == other._symbols

    def __repr__(self) -> str:
        return f"SymbolList({self.join()!r})"


class SymbolStore(ABC):
    """
    Persistent per-group symbol strings.

    Every successful write emits ``changed(group, joined)``; a host uses this
    to schedule a recompile.
    """

    def __init__(self) -> None:
        self.changed = Signal("symbols_changed")

    @abstractmethod
    def get_symbols(self, group: BuildTargetGroup) -> str:
        """Return the ``;``-joined symbols for a group (empty if none)."""
        pass

    @abstractmethod
    def _write(self, group: BuildTargetGroup, joined: str) -> None:
        pass

    def set_symbols(self, group: BuildTargetGroup, joined: str) -> None:
        """
        Persist the ``;``-joined symbols for a group.

        Args:
            group: Build target group
            joined: Symbol string to store

        Raises:
            SymbolStoreError: If the write fails
        """
        self._write(group, joined)
        logger.info(f"Scripting symbols for {group.value}: {joined or '(none)'}")
        self.changed.emit(group, joined)


class InMemorySymbolStore(SymbolStore):
    """Symbol store held in memory. Records every write."""

    def __init__(self, initial: Optional[Dict[BuildTargetGroup, str]] = None):
        super().__init__()
        self._symbols: Dict[BuildTargetGroup, str] = dict(initial or {})
        self.writes: List[Tuple[BuildTargetGroup, str]] = []

    def get_symbols(self, group: BuildTargetGroup) -> str:
        return self._symbols.get(group, "")

    def _write(self, group: BuildTargetGroup, joined: str) -> None:
        self._symbols[group] = joined
        self.writes.append((group, joined))


class IniSymbolStore(SymbolStore):
    """
    Symbol store backed by an INI file.

    Example file:
        [group:standalone]
        symbols = UNITY_CCU;USE_NUMPY

        [group:server]
        symbols = UNITY_CCU

    Other sections (such as ``[ccu]``) are read back and written out again
    with their keys and values intact. Every write re-serialises the whole
    file through configparser, so comments anywhere in the file are lost.
    Keep commented configuration in a separate file from the store.
    """

    SECTION_PREFIX = "group:"
    KEY = "symbols"

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: INI file path (created on first write)
        """
        super().__init__()
        self.path = Path(path)

    def _read(self) -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None)
        if not self.path.exists():
            return parser
        try:
            parser.read(self.path, encoding="utf-8")
        except configparser.Error as e:
            raise SymbolStoreError(f"Failed to parse {self.path}: {e}") from e
        return parser

    def groups(self) -> List[BuildTargetGroup]:
        """List groups that have a stored symbol string."""
        groups = []
        for section in self._read().sections():
            if section.startswith(self.SECTION_PREFIX):
                groups.append(BuildTargetGroup.from_string(section[len(self.SECTION_PREFIX):]))
        return groups

    def get_symbols(self, group: BuildTargetGroup) -> str:
        parser = self._read()
        section = f"{self.SECTION_PREFIX}{group.value}"
        if section not in parser:
            return ""
        return parser[section].get(self.KEY, "").strip()

    def _write(self, group: BuildTargetGroup, joined: str) -> None:
        parser = self._read()
        section = f"{self.SECTION_PREFIX}{group.value}"
        if section not in parser:
            parser.add_section(section)
        parser[section][self.KEY] = joined

        temp_file = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as f:
                parser.write(f)

            # Atomic rename
            temp_file.replace(self.path)

        except KeyboardInterrupt:
            temp_file.unlink(missing_ok=True)
            raise
        except OSError as e:
            temp_file.unlink(missing_ok=True)
            raise SymbolStoreError(f"Failed to write {self.path}: {e}") from e
