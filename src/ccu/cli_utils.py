"""CLI utility functions for ccu.

This module provides common utilities used across CLI commands including:
- Importing the modules whose declarations should be scanned
- Error handling and formatting
- Project path validation
"""

import importlib
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from ccu.reconcile import ReconcileResult

logger = logging.getLogger(__name__)


class ModuleImporter:
    """Imports the modules named on the command line."""

    @staticmethod
    def import_modules(names: Sequence[str], project_dir: Path) -> List[str]:
        """Import modules so their declarations and classes are loaded.

        A module that fails to import is reported and skipped; an absent
        optional dependency is the normal case, not an error.

        Args:
            names: Dotted module names
            project_dir: Directory prepended to sys.path first

        Returns:
            Names that imported successfully
        """
        project_path = str(project_dir.resolve())
        if project_path not in sys.path:
            sys.path.insert(0, project_path)

        imported = []
        for name in names:
            try:
                importlib.import_module(name)
            except ImportError as e:
                logger.warning(f"Could not import {name}: {e}")
                continue
            imported.append(name)
        return imported


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Invalid configuration")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path does not exist: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
        if not project_dir.is_dir():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)


def format_result(result: ReconcileResult) -> List[str]:
    """Render a reconcile result as display lines."""
    lines = [f"Group:   {result.group.value}"]
    if result.bootstrapped:
        lines.append("Enabled conditional compilation; run update again after recompiling.")
    if result.reset:
        lines.append("Reset: all dependency defines removed")
    lines.append(f"Symbols: {result.symbols or '(none)'}")
    lines.append(f"Defines: {', '.join(result.defines) or '(none)'}")
    lines.append("Written: yes" if result.written else "Written: no (unchanged)")
    return lines
