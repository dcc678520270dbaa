"""
Compilation lifecycle events.

The host fires two notifications the utility listens to:
- compilation_finished(output_path, messages) after each compile
- reload_complete() once per reload cycle, after all modules are live
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Sequence

logger = logging.getLogger(__name__)


class MessageSeverity(Enum):
    """Compiler message severity."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def from_string(cls, value: str) -> "MessageSeverity":
        """Convert string to MessageSeverity, defaulting to INFO if invalid."""
        try:
            return cls(value.lower())
        except ValueError:
            return cls.INFO


@dataclass(frozen=True)
class CompilerMessage:
    """A single compiler diagnostic.

    Attributes:
        severity: Diagnostic severity
        code: Host-defined diagnostic code (e.g., "CS0246")
        message: Full diagnostic text
    """

    severity: MessageSeverity
    code: str = ""
    message: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity is MessageSeverity.ERROR

    def matches_code(self, codes: Sequence[str]) -> bool:
        """Check whether this message carries one of the given codes.

        The code field is checked first, then the message text, since some
        hosts only embed the code in the formatted message.
        """
        for code in codes:
            if self.code == code or code in self.message:
                return True
        return False


class Signal:
    """A synchronous multicast callback list."""

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Callable[..., Any]] = []

    def connect(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        """Register a handler. Returns the handler so it can be used as a decorator."""
        self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable[..., Any]) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, *args: Any) -> None:
        """Call every handler in registration order on the calling thread."""
        logger.debug(f"Emitting {self.name} to {len(self._handlers)} handler(s)")
        for handler in list(self._handlers):
            handler(*args)

    def __len__(self) -> int:
        return len(self._handlers)


class CompilationEvents:
    """The host's compilation and reload notifications."""

    def __init__(self) -> None:
        self.compilation_finished = Signal("compilation_finished")
        self.reload_complete = Signal("reload_complete")
