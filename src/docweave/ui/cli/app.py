"""Typer application wiring for the docweave CLI."""

from __future__ import annotations

from typing import Annotated

import typer

from docweave.core.config import load_config
from docweave.core.exceptions import ConfigError
from docweave.ui.cli.commands import html, pandoc, pdf, post, rst2pdf, themes, watch
from docweave.version import get_version

from ._options import ConfigOption
from .state import configure_logging, debug_enabled, emit_error, set_cli_state


app = typer.Typer(
    help="Compile, convert and publish documents, or rebuild them whenever they change.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def _root(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (repeat for more detail).",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks on failure."),
    ] = False,
    config: ConfigOption = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the docweave version and exit.",
        ),
    ] = False,
) -> None:
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    configure_logging(state)
    if config is not None:
        try:
            state.config = load_config(config)
        except ConfigError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc


app.command()(watch)
app.command()(pdf)
app.command()(html)
app.command()(pandoc)
app.command(name="rst2pdf")(rst2pdf)
app.command()(post)
app.command()(themes)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - last-resort reporting
        from .state import get_cli_state

        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
