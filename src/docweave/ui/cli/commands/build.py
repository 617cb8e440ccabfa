"""One-shot build commands: `pdf`, `html`, `pandoc` and `rst2pdf`."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from docweave.adapters.markdown import normalize_markdown_extensions
from docweave.adapters.rst2pdf import rst2pdf as run_rst2pdf
from docweave.api import compile_pdf, convert_document, render_html, render_pdf
from docweave.core.exceptions import ConversionError, DocweaveError

from .._options import (
    ENGINE_PANEL,
    OUTPUT_PANEL,
    CompilerOption,
    ExtensionOption,
    InputArgument,
    OutputOption,
    ShellEscapeOption,
)
from ..diagnostics import CliEmitter
from ..presenter import present_conversion_failure, present_output
from ..state import emit_error, get_cli_state


ExtraArgsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--option",
        "-O",
        help="Extra argument forwarded to the external tool (repeatable).",
        rich_help_panel=ENGINE_PANEL,
    ),
]


def _fail(exc: DocweaveError) -> typer.Exit:
    state = get_cli_state()
    if isinstance(exc, ConversionError):
        present_conversion_failure(state, exc)
    else:
        emit_error(str(exc), exception=exc)
    return typer.Exit(code=1)


def pdf(
    input: InputArgument,
    output: OutputOption = None,
    compiler: CompilerOption = None,
    clean: Annotated[
        bool | None,
        typer.Option(
            "--clean/--keep",
            help="Remove auxiliary files after building (default from config).",
            rich_help_panel=OUTPUT_PANEL,
        ),
    ] = None,
    shell_escape: ShellEscapeOption = False,
    options: ExtraArgsOption = None,
) -> None:
    """Build a PDF from a LaTeX, reStructuredText or Markdown document."""
    state = get_cli_state()
    config = state.resolved_config()
    emitter = CliEmitter(state=state)
    resolved_clean = config.latex.clean if clean is None else clean
    extra = list(options or [])
    is_rst = input.suffix.lower() in {".rst", ".rest"}

    try:
        if is_rst or (compiler or "").lower() == "rst2pdf":
            result = compile_pdf(
                input,
                compiler=compiler or "rst2pdf",
                options=extra or config.rst2pdf.options,
                emitter=emitter,
            )
            if output is not None and result.resolve() != output.resolve():
                output.parent.mkdir(parents=True, exist_ok=True)
                result = result.replace(output)
        else:
            result = render_pdf(
                input,
                output,
                compiler or config.latex.engine,
                clean=resolved_clean,
                shell_escape=shell_escape or config.latex.shell_escape,
                options=extra,
                emitter=emitter,
            )
    except DocweaveError as exc:
        raise _fail(exc) from exc

    present_output(state, result, label="PDF")


def html(
    input: InputArgument,
    output: OutputOption = None,
    extensions: ExtensionOption = None,
) -> None:
    """Render a Markdown document to a standalone HTML page."""
    state = get_cli_state()
    config = state.resolved_config()
    active = normalize_markdown_extensions(extensions) or config.markdown.extensions
    try:
        result = render_html(input, output, extensions=active)
    except DocweaveError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    present_output(state, Path(result), label="HTML")


def pandoc(
    input: InputArgument,
    to: Annotated[
        str | None,
        typer.Option("--to", "-t", help="Pandoc output format (default from config, html)."),
    ] = None,
    output: OutputOption = None,
    options: ExtraArgsOption = None,
) -> None:
    """Convert a document with Pandoc."""
    state = get_cli_state()
    config = state.resolved_config()
    try:
        result = convert_document(
            input,
            to or config.pandoc.to,
            output=output,
            options=[*config.pandoc.options, *(options or [])],
            command=config.pandoc.command,
            emitter=CliEmitter(state=state),
        )
    except DocweaveError as exc:
        raise _fail(exc) from exc
    present_output(state, Path(result))


def rst2pdf(
    input: InputArgument,
    command: Annotated[
        str | None,
        typer.Option("--command", help="Path or name of the rst2pdf program."),
    ] = None,
    options: ExtraArgsOption = None,
) -> None:
    """Convert a reStructuredText document to PDF with rst2pdf."""
    state = get_cli_state()
    config = state.resolved_config()
    try:
        result = run_rst2pdf(
            input,
            command or config.rst2pdf.command,
            [*config.rst2pdf.options, *(options or [])],
            emitter=CliEmitter(state=state),
        )
    except DocweaveError as exc:
        raise _fail(exc) from exc
    present_output(state, result, label="PDF")


__all__ = ["html", "pandoc", "pdf", "rst2pdf"]
