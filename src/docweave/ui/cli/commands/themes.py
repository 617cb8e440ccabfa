"""Implementation of the `docweave themes` command."""

from __future__ import annotations

from typing import Annotated

import typer

from docweave.adapters.highlight import (
    ThemeNotFoundError,
    get_theme,
    list_themes,
    theme_definitions,
)

from ..presenter import present_theme, present_theme_list
from ..state import emit_error, get_cli_state


def themes(
    name: Annotated[
        str | None,
        typer.Argument(help="Theme to inspect; list all themes when omitted."),
    ] = None,
    fmt: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Print the theme as 'latex' macros or 'html' CSS instead of a colour table.",
        ),
    ] = None,
) -> None:
    """List syntax-highlighting themes or show one of them."""
    state = get_cli_state()
    if name is None:
        present_theme_list(state, list_themes())
        return

    if fmt is not None and fmt not in {"latex", "html"}:
        raise typer.BadParameter("--format must be 'latex' or 'html'.")

    try:
        if fmt is None:
            present_theme(state, get_theme(name))
        else:
            typer.echo(theme_definitions(name, fmt))  # type: ignore[arg-type]
    except ThemeNotFoundError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["themes"]
