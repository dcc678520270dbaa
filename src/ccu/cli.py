"""
Command-line interface for ccu.

This module provides the `ccu` CLI tool for inspecting and updating a
project's build symbols from its optional dependency declarations.
"""

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ccu.cli_utils import (
    ErrorFormatter,
    ModuleImporter,
    PathValidator,
    format_result,
)
from ccu.config import (
    BuildSettings,
    BuildTargetGroup,
    CCUConfig,
    CCUConfigError,
    IniSymbolStore,
    SymbolList,
    SymbolStoreError,
)
from ccu.log_setup import setup_logging
from ccu.reconcile import ConditionalCompilationUtility, discover_marker_types, harvest_dependencies

DEFAULT_STORE = "ccu.ini"


@dataclass
class CommandArgs:
    """Arguments shared by every command."""

    project_dir: Path
    store: Optional[Path] = None
    group: Optional[str] = None
    modules: List[str] = field(default_factory=list)
    reset: bool = False
    verbose: bool = False
    log_file: Optional[Path] = None

    @property
    def store_path(self) -> Path:
        return self.store if self.store is not None else self.project_dir / DEFAULT_STORE


def _build_utility(args: CommandArgs) -> ConditionalCompilationUtility:
    store_path = args.store_path
    config = CCUConfig.load(store_path)

    selected = BuildTargetGroup.from_string(args.group)
    if args.group and selected is BuildTargetGroup.UNKNOWN:
        raise CCUConfigError(f"Unknown build target group: {args.group}")

    ModuleImporter.import_modules(args.modules, args.project_dir)
    return ConditionalCompilationUtility(
        IniSymbolStore(store_path),
        settings=BuildSettings(
            selected_group=selected,
            active_group=BuildTargetGroup.STANDALONE,
        ),
        config=config,
    )


def status_command(args: CommandArgs) -> None:
    """Show the current group, whether ccu is enabled, and the symbols.

    Examples:
        ccu status                    # Status for the default group
        ccu status -g server          # Status for the 'server' group
    """
    utility = _build_utility(args)
    group = utility.reconciler.resolve_group()
    symbols = SymbolList.parse(utility.reconciler.store.get_symbols(group))

    print(f"Group:   {group.value}")
    print(f"Enabled: {'yes' if utility.enabled else 'no'}")
    print(f"Symbols: {symbols.join() or '(none)'}")


def scan_command(args: CommandArgs) -> None:
    """List declared optional dependencies and whether each one is loaded.

    Examples:
        ccu scan -m mylib.optional    # Scan after importing mylib.optional
    """
    utility = _build_utility(args)
    reconciler = utility.reconciler

    discovery = discover_marker_types(reconciler.enumerator, reconciler.enable_symbol)
    for cls, missing in discovery.rejected:
        ErrorFormatter.print_warning(f"{cls.__module__}.{cls.__qualname__} missing field: {missing}")

    dependencies = harvest_dependencies(reconciler.enumerator, discovery.types, reconciler.registry)
    if not dependencies:
        print("No optional dependencies declared.")
        return

    print(f"Marker types: {len(discovery.marker_types)}")
    print("Optional dependencies:")
    for dependent_class, define in dependencies.items():
        found = reconciler.enumerator.find_type(dependent_class) is not None
        mark = "✓" if found else "-"
        print(f"  {mark} {define:<24} {dependent_class}")


def update_command(args: CommandArgs) -> None:
    """Run one reconciliation pass and write the symbols if they changed.

    Examples:
        ccu update -m mylib           # Update default group
        ccu update --reset            # Remove all dependency defines
    """
    utility = _build_utility(args)
    result = utility.update(reset=args.reset)
    for line in format_result(result):
        print(line)
    if not result.bootstrapped:
        ErrorFormatter.print_success("Symbols up to date")


COMMANDS = {
    "status": status_command,
    "scan": scan_command,
    "update": update_command,
}


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "-s",
        "--store",
        type=Path,
        default=None,
        help=f"Symbol store INI file (default: <project_dir>/{DEFAULT_STORE})",
    )
    parser.add_argument(
        "-g",
        "--group",
        default=None,
        help="Build target group (default: from config, else standalone)",
    )
    parser.add_argument(
        "-m",
        "--import",
        dest="modules",
        action="append",
        default=[],
        help="Module to import before scanning (repeatable)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this rotating file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """ccu - Conditional compilation symbol manager."""
    parser = argparse.ArgumentParser(
        prog="ccu",
        description="Keep build symbols in sync with loaded optional dependencies",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="ccu 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    status_parser = subparsers.add_parser("status", help="Show group and symbols")
    _add_common_arguments(status_parser)

    scan_parser = subparsers.add_parser("scan", help="List optional dependencies")
    _add_common_arguments(scan_parser)

    update_parser = subparsers.add_parser("update", help="Reconcile build symbols")
    _add_common_arguments(update_parser)
    update_parser.add_argument(
        "--reset",
        action="store_true",
        help="Remove every dependency define",
    )

    # Parse arguments
    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    PathValidator.validate_project_dir(parsed_args.project_dir)

    args = CommandArgs(
        project_dir=parsed_args.project_dir,
        store=parsed_args.store,
        group=parsed_args.group,
        modules=parsed_args.modules,
        reset=getattr(parsed_args, "reset", False),
        verbose=parsed_args.verbose,
        log_file=parsed_args.log_file,
    )
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        COMMANDS[parsed_args.command](args)
    except CCUConfigError as e:
        ErrorFormatter.print_error("Invalid configuration", str(e))
        sys.exit(1)
    except SymbolStoreError as e:
        ErrorFormatter.print_error("Symbol store error", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)

    sys.exit(0)


if __name__ == "__main__":
    main()
