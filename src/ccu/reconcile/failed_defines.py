"""
Persisted fingerprint of the last define set that failed to compile.

Without it, a define whose dependent class exists but whose guarded code does
not compile oscillates forever: the reset pass removes it, the next reload
adds it back, compilation fails again. When the define set active at failure
time equals the stored one, the error listener skips the reset.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Optional

logger = logging.getLogger(__name__)


def _fingerprint(defines: Iterable[str]) -> FrozenSet[str]:
    return frozenset(d.casefold() for d in defines)


class FailedDefinesCache:
    """JSON file holding the last failing define set."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[FrozenSet[str]]:
        """
        Read the stored fingerprint.

        Returns:
            Stored define set, or None if absent or unreadable
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return _fingerprint(data["defines"])
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Corrupted failed-defines file {self.path}: {e}")
            return None
        except OSError as e:
            logger.warning(f"Failed to read {self.path}: {e}")
            return None

    def matches(self, defines: Iterable[str]) -> bool:
        stored = self.load()
        return stored is not None and stored == _fingerprint(defines)

    def save(self, defines: Iterable[str]) -> None:
        """Store a define set, replacing any previous one."""
        data: dict[str, Any] = {"defines": sorted(defines), "updated_at": time.time()}
        temp_file = self.path.with_suffix(".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)

            # Atomic rename
            temp_file.replace(self.path)

        except KeyboardInterrupt:
            temp_file.unlink(missing_ok=True)
            raise
        except OSError as e:
            logger.error(f"Failed to write failed-defines file: {e}")
            temp_file.unlink(missing_ok=True)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
