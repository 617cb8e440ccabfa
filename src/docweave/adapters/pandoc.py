"""Pandoc invocation helpers."""

from __future__ import annotations

from collections.abc import Sequence
import os
from pathlib import Path

from docweave.core.diagnostics import DiagnosticEmitter
from docweave.core.exceptions import ConversionError
from docweave.core.paths import same_path, with_ext

from ._process import failure_detail, run_tool


# Pandoc writer names whose conventional file extension differs from the name.
_FORMAT_EXTENSIONS = {
    "latex": "tex",
    "beamer": "tex",
    "context": "tex",
    "markdown": "md",
    "markdown_strict": "md",
    "markdown_phpextra": "md",
    "markdown_mmd": "md",
    "gfm": "md",
    "commonmark": "md",
    "commonmark_x": "md",
    "plain": "txt",
    "html4": "html",
    "html5": "html",
    "revealjs": "html",
    "slidy": "html",
    "asciidoc": "adoc",
    "mediawiki": "wiki",
    "native": "hs",
}


def _writer_name(to: str) -> str:
    return to.split("+", 1)[0].split("-", 1)[0].strip().lower()


def format_extension(to: str) -> str:
    """Return the file extension used for a Pandoc output format."""
    writer = _writer_name(to)
    return _FORMAT_EXTENSIONS.get(writer, writer)


def default_output(input: str | os.PathLike[str], to: str) -> Path:
    """Return the output path Pandoc writes to when none is given.

    When the conventional extension of ``to`` is the one of ``input`` (``gfm``
    from ``.md``), the writer name itself is used instead.
    """
    source = Path(input)
    target = with_ext(source, format_extension(to))
    if same_path(target, source):
        target = with_ext(source, _writer_name(to))
    return target


def pandoc_convert(
    input: str | os.PathLike[str],
    to: str = "html",
    output: str | os.PathLike[str] | None = None,
    options: Sequence[str] = (),
    command: str = "pandoc",
    *,
    emitter: DiagnosticEmitter | None = None,
) -> Path:
    """Convert ``input`` to the Pandoc format ``to`` and return the output path."""
    source = Path(input)
    target = Path(output) if output is not None else default_output(source, to)
    if same_path(target, source):
        raise ConversionError(
            f"Converting '{source}' to {to} would overwrite the source file; "
            "pass an explicit output path."
        )
    argv = [command, str(source), "--to", to, "--output", str(target), *options]
    result = run_tool(argv, emitter=emitter)
    if result.returncode != 0:
        detail = failure_detail(result)
        message = f"pandoc failed with exit code {result.returncode}"
        if detail:
            message = f"{message}: {detail}"
        raise ConversionError(
            message, command=argv, returncode=result.returncode, output=detail or None
        )
    return target


__all__ = ["default_output", "format_extension", "pandoc_convert"]
