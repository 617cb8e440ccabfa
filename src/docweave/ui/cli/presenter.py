"""Rich presenters for CLI output."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich import box
from rich.table import Table
from rich.text import Text

from docweave.adapters.highlight import HighlightTheme
from docweave.core.exceptions import ConversionError

from .state import CLIState, emit_error


_OUTPUT_TAIL = 20


def format_path(path: Path) -> str:
    """Format a path relative to the current working directory for display."""
    resolved = path.resolve()
    try:
        return str(resolved.relative_to(Path.cwd()))
    except ValueError:
        return str(resolved)


def present_output(state: CLIState, path: Path | str, *, label: str = "Output") -> None:
    """Print the location of a produced artefact."""
    location = format_path(path) if isinstance(path, Path) else path
    state.console.print(Text.assemble((f"{label}: ", "bold green"), (location, "bright_green")))


def present_conversion_failure(state: CLIState, error: ConversionError) -> None:
    """Report a failed external tool run, with its output when verbose."""
    emit_error(str(error), exception=error)
    if state.verbosity < 1:
        return
    if error.command:
        state.err_console.print(Text(f"command: {' '.join(error.command)}", style="dim"))
    if error.output:
        lines = error.output.splitlines()[-_OUTPUT_TAIL:]
        state.err_console.print(Text("\n".join(lines), style="dim"))


def present_theme_list(state: CLIState, names: Sequence[str]) -> None:
    """Print the available highlighting themes."""
    if not state.console.is_terminal:
        for name in names:
            state.console.print(name, highlight=False)
        return
    table = Table(title="Highlighting themes", box=box.SQUARE, header_style="bold cyan")
    table.add_column("Theme")
    for name in names:
        table.add_row(name)
    state.console.print(table)


def present_theme(state: CLIState, theme: HighlightTheme) -> None:
    """Print the colours defined by a theme."""
    table = Table(title=theme.name, box=box.SQUARE, header_style="bold cyan")
    table.add_column("Token")
    table.add_column("Colour")
    table.add_row("background", theme.background or "-")
    table.add_row("highlight", theme.highlight or "-")
    for token, color in theme.tokens.items():
        table.add_row(token, Text(color, style=color))
    state.console.print(table)


__all__ = [
    "format_path",
    "present_conversion_failure",
    "present_output",
    "present_theme",
    "present_theme_list",
]
