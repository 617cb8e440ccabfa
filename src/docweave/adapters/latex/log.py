"""Extract structured messages from LaTeX log files."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
import re


class LatexMessageSeverity(Enum):
    """Classification severity extracted from LaTeX output."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class LatexMessage:
    """Structured LaTeX message extracted from the build log."""

    severity: LatexMessageSeverity
    summary: str
    details: list[str] = field(default_factory=list)


_MESSAGE_PATTERNS: list[tuple[re.Pattern[str], LatexMessageSeverity]] = [
    (re.compile(r"^! (?P<summary>.+)$"), LatexMessageSeverity.ERROR),
    (
        re.compile(r"^(?:\./)?[^:\s]+\.tex:\d+: (?P<summary>.+)$"),
        LatexMessageSeverity.ERROR,
    ),
    (
        re.compile(r"^Latexmk: (?P<summary>.+\b(?:error|failed|failure).*)$", re.I),
        LatexMessageSeverity.ERROR,
    ),
    (re.compile(r"^LaTeX Warning: (?P<summary>.+)$"), LatexMessageSeverity.WARNING),
    (
        re.compile(r"^Package (?P<context>\S+) Warning: (?P<summary>.+)$"),
        LatexMessageSeverity.WARNING,
    ),
    (
        re.compile(r"^Class (?P<context>\S+) Warning: (?P<summary>.+)$"),
        LatexMessageSeverity.WARNING,
    ),
    (re.compile(r"^(?P<summary>Overfull \\[hv]box .+)$"), LatexMessageSeverity.WARNING),
    (re.compile(r"^(?P<summary>Underfull \\[hv]box .+)$"), LatexMessageSeverity.WARNING),
]

# Lines following an error that carry its location or context.
_DETAIL_PATTERN = re.compile(r"^(?:l\.\d+|<\*>|<argument>|<to be read again>|\s{2,}\S)")
_MAX_DETAILS = 4


def classify_line(line: str) -> tuple[LatexMessageSeverity, str] | None:
    """Return the severity and summary of a log line, or ``None``."""
    for pattern, severity in _MESSAGE_PATTERNS:
        match = pattern.match(line)
        if match:
            summary = match.group("summary").strip()
            context = match.groupdict().get("context")
            if context:
                summary = f"{context}: {summary}"
            return severity, summary
    return None


def parse_latex_lines(lines: Iterable[str]) -> list[LatexMessage]:
    """Parse LaTeX output lines into warnings and errors."""
    messages: list[LatexMessage] = []
    current: LatexMessage | None = None
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        classified = classify_line(line)
        if classified is not None:
            severity, summary = classified
            current = LatexMessage(severity=severity, summary=summary)
            messages.append(current)
            continue
        if (
            current is not None
            and current.severity is LatexMessageSeverity.ERROR
            and len(current.details) < _MAX_DETAILS
            and _DETAIL_PATTERN.match(line)
        ):
            current.details.append(line.strip())
    return messages


def parse_latex_log(log_path: Path) -> list[LatexMessage]:
    """Parse a LaTeX log file; a missing file yields no messages."""
    try:
        with log_path.open("r", encoding="utf-8", errors="replace") as handle:
            return parse_latex_lines(handle)
    except FileNotFoundError:
        return []


__all__ = [
    "LatexMessage",
    "LatexMessageSeverity",
    "classify_line",
    "parse_latex_lines",
    "parse_latex_log",
]
