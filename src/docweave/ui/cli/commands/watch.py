"""Implementation of the `docweave watch` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from docweave.api import compile_document
from docweave.core.exceptions import ConversionError, DocweaveError
from docweave.core.watch import WatchLoop

from .._options import WATCH_PANEL, CompilerOption, ExtensionOption, WatchInputsArgument
from ..diagnostics import CliEmitter
from ..presenter import present_conversion_failure, present_output
from ..state import emit_error, emit_info, get_cli_state


def watch(
    inputs: WatchInputsArgument,
    interval: Annotated[
        float | None,
        typer.Option(
            "--interval",
            "-i",
            min=0,
            help="Seconds to pause between two checks (default from config, 1s).",
            rich_help_panel=WATCH_PANEL,
        ),
    ] = None,
    to: Annotated[
        str | None,
        typer.Option(
            "--to",
            "-t",
            help="Target format: pdf, html or any Pandoc writer (guessed from the extension).",
            rich_help_panel=WATCH_PANEL,
        ),
    ] = None,
    compiler: CompilerOption = None,
    extensions: ExtensionOption = None,
    skip_missing: Annotated[
        bool | None,
        typer.Option(
            "--skip-missing/--fail-missing",
            help="Keep watching when a file disappears instead of stopping.",
            rich_help_panel=WATCH_PANEL,
        ),
    ] = None,
) -> None:
    """Rebuild documents every time they are saved. Stop with Ctrl+C."""
    state = get_cli_state()
    config = state.resolved_config()
    emitter = CliEmitter(state=state)

    resolved_interval = config.watch.interval if interval is None else interval
    if skip_missing is None:
        missing = config.watch.missing
    else:
        missing = "skip" if skip_missing else "fail"
    markdown_extensions = list(extensions) if extensions else config.markdown.extensions

    def _compile(path: Path) -> None:
        engine = compiler
        if engine is None and path.suffix.lower() not in {".rst", ".rest"}:
            engine = config.latex.engine
        result = compile_document(
            path,
            to,
            compiler=engine,
            extensions=markdown_extensions,
            emitter=emitter,
        )
        present_output(state, result if isinstance(result, Path) else str(result))

    try:
        loop = WatchLoop(
            inputs,
            _compile,
            interval=resolved_interval,
            missing=missing,
            emitter=emitter,
        )
        loop.run()
    except KeyboardInterrupt:
        emit_info("Watch stopped.")
        return
    except ConversionError as exc:
        present_conversion_failure(state, exc)
        raise typer.Exit(code=1) from exc
    except DocweaveError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["watch"]
