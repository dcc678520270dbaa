"""
Utility configuration parser.

This module reads the ``[ccu]`` section of an INI file and exposes it as a
typed configuration object. Every key is optional.

Example ccu.ini:
    [ccu]
    enable_symbol = UNITY_CCU
    unresolved_codes = CS0246, CS0234
    reload_delay = 1.0
    failed_defines_path = .ccu/failed_defines.json
    group = standalone

Usage:
    config = CCUConfig.load(Path("ccu.ini"))
    print(config.enable_symbol)
"""

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from ccu.config.build_settings import BuildTargetGroup

DEFAULT_ENABLE_SYMBOL = "UNITY_CCU"
DEFAULT_UNRESOLVED_CODES = ("CS0246",)
SECTION = "ccu"


class CCUConfigError(Exception):
    """Exception raised for utility configuration errors."""

    pass


@dataclass(frozen=True)
class CCUConfig:
    """
    Utility configuration.

    Attributes:
        enable_symbol: Symbol that switches the utility on and tags marker types
        unresolved_codes: Diagnostic codes meaning "type or symbol not found"
        reload_delay: Seconds to pause after a pass that rewrote the symbols
        failed_defines_path: Where to persist the last failing define set
            (None disables the fingerprint check)
        group: Explicit build target group, overriding host selection
    """

    enable_symbol: str = DEFAULT_ENABLE_SYMBOL
    unresolved_codes: Tuple[str, ...] = field(default=DEFAULT_UNRESOLVED_CODES)
    reload_delay: float = 0.0
    failed_defines_path: Optional[Path] = None
    group: Optional[BuildTargetGroup] = None

    def __post_init__(self) -> None:
        if not self.enable_symbol or ";" in self.enable_symbol:
            raise CCUConfigError(f"Invalid enable_symbol: {self.enable_symbol!r}")
        if self.reload_delay < 0:
            raise CCUConfigError(f"reload_delay must be >= 0, got {self.reload_delay}")

    @classmethod
    def load(cls, ini_path: Optional[Path] = None) -> "CCUConfig":
        """
        Load configuration from an INI file.

        Args:
            ini_path: Path to the INI file; a missing path or a file without
                a [ccu] section yields the defaults

        Returns:
            CCUConfig instance

        Raises:
            CCUConfigError: If the file cannot be parsed or holds invalid values
        """
        if ini_path is None or not Path(ini_path).exists():
            return cls()

        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise CCUConfigError(f"Failed to parse {ini_path}: {e}") from e

        if SECTION not in parser:
            return cls()
        section = parser[SECTION]

        codes_str = section.get("unresolved_codes", "")
        codes = tuple(c.strip() for c in codes_str.split(",") if c.strip())

        try:
            reload_delay = section.getfloat("reload_delay", fallback=0.0)
        except ValueError as e:
            raise CCUConfigError(f"Invalid reload_delay in {ini_path}: {e}") from e

        group = None
        group_str = section.get("group", "").strip()
        if group_str:
            group = BuildTargetGroup.from_string(group_str)
            if group is BuildTargetGroup.UNKNOWN:
                raise CCUConfigError(f"Unknown build target group in {ini_path}: {group_str}")

        failed_path = section.get("failed_defines_path", "").strip()
        failed_defines_path = None
        if failed_path:
            failed_defines_path = Path(failed_path)
            if not failed_defines_path.is_absolute():
                failed_defines_path = Path(ini_path).parent / failed_defines_path

        return cls(
            enable_symbol=section.get("enable_symbol", DEFAULT_ENABLE_SYMBOL).strip(),
            unresolved_codes=codes or DEFAULT_UNRESOLVED_CODES,
            reload_delay=reload_delay,
            failed_defines_path=failed_defines_path,
            group=group,
        )
