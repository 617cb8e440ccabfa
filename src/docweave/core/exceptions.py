"""Exception hierarchy shared by the docweave toolchain."""

from __future__ import annotations

from collections.abc import Sequence


class DocweaveError(RuntimeError):
    """Base exception for docweave failures."""


class ToolNotFoundError(DocweaveError):
    """Raised when an external program cannot be located on the PATH."""

    def __init__(self, tool: str, hint: str | None = None) -> None:
        message = f"'{tool}' could not be found on the PATH."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)
        self.tool = tool


class ConversionError(DocweaveError):
    """Raised when an external converter fails or produces no output."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] | None = None,
        returncode: int | None = None,
        output: str | None = None,
    ) -> None:
        super().__init__(message)
        self.command = list(command) if command is not None else None
        self.returncode = returncode
        self.output = output


class OutputLockedError(DocweaveError):
    """Raised when an existing output file cannot be replaced."""


class WatchConfigurationError(DocweaveError, ValueError):
    """Raised when a watch loop is configured with invalid arguments."""


class WatchTargetError(DocweaveError):
    """Raised when a watched path can no longer be inspected."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read modification time of '{path}': {reason}")
        self.path = path


class PublishError(DocweaveError):
    """Raised when a blogging API rejects a request."""


class ConfigError(DocweaveError, ValueError):
    """Raised when a configuration file cannot be loaded."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigError",
    "ConversionError",
    "DocweaveError",
    "OutputLockedError",
    "PublishError",
    "ToolNotFoundError",
    "WatchConfigurationError",
    "WatchTargetError",
    "exception_hint",
    "exception_messages",
]
