"""Thin wrapper around the ``rst2pdf`` converter (ReportLab based)."""

from __future__ import annotations

from collections.abc import Sequence
import os
from pathlib import Path

from docweave.core.diagnostics import DiagnosticEmitter
from docweave.core.exceptions import ConversionError
from docweave.core.paths import with_ext

from ._process import failure_detail, run_tool


def rst2pdf(
    input: str | os.PathLike[str],
    command: str = "rst2pdf",
    options: Sequence[str] = (),
    *,
    emitter: DiagnosticEmitter | None = None,
) -> Path:
    """Convert a reStructuredText file to PDF and return the PDF path.

    The output sits next to the input with a ``.pdf`` extension.
    """
    source = Path(input)
    output = with_ext(source, "pdf")
    argv = [command, str(source), "-o", str(output), *options]
    result = run_tool(argv, emitter=emitter)
    if output.exists():
        return output

    message = "conversion by rst2pdf failed"
    detail = failure_detail(result)
    if detail:
        message = f"{message}: {detail}"
    raise ConversionError(
        message,
        command=argv,
        returncode=result.returncode,
        output=detail or None,
    )


__all__ = ["rst2pdf"]
