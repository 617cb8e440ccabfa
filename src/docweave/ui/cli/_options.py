"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
ENGINE_PANEL = "Engine"
WATCH_PANEL = "Watching"
PUBLISH_PANEL = "Publishing"

InputArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="Source document (.tex, .rst, .md).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

WatchInputsArgument = Annotated[
    list[Path],
    typer.Argument(
        metavar="INPUT...",
        help="Documents to watch; each is rebuilt whenever it changes.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output file (defaults to the input name with the target extension).",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

CompilerOption = Annotated[
    str | None,
    typer.Option(
        "--compiler",
        "-c",
        help="PDF compiler: pdflatex, xelatex, lualatex, tectonic or rst2pdf.",
        rich_help_panel=ENGINE_PANEL,
    ),
]

ShellEscapeOption = Annotated[
    bool,
    typer.Option(
        "--shell-escape",
        help="Allow the LaTeX engine to run external commands.",
        rich_help_panel=ENGINE_PANEL,
    ),
]

ExtensionOption = Annotated[
    list[str] | None,
    typer.Option(
        "--extension",
        "-x",
        help="Python-Markdown extension to enable (repeatable, comma separated).",
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="Configuration file (defaults to ./docweave.yml when present).",
        exists=True,
        dir_okay=False,
    ),
]


__all__ = [
    "CompilerOption",
    "ConfigOption",
    "ENGINE_PANEL",
    "ExtensionOption",
    "INPUTS_PANEL",
    "InputArgument",
    "OUTPUT_PANEL",
    "OutputOption",
    "PUBLISH_PANEL",
    "ShellEscapeOption",
    "WATCH_PANEL",
    "WatchInputsArgument",
]
