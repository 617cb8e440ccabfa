"""Shared helpers for invoking external programs."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from pathlib import Path
import subprocess

from docweave.core.diagnostics import DiagnosticEmitter, ensure_emitter
from docweave.core.exceptions import ConversionError, ToolNotFoundError


logger = logging.getLogger(__name__)


def run_tool(
    argv: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``argv`` capturing its output; raise when the program is missing."""
    command = [str(token) for token in argv]
    ensure_emitter(emitter).event("tool_run", {"command": command})
    logger.debug("Running %s (cwd=%s)", command, cwd)
    try:
        return subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as exc:
        raise ToolNotFoundError(command[0]) from exc
    except OSError as exc:
        raise ConversionError(f"Failed to invoke {command[0]}: {exc}", command=command) from exc


def failure_detail(result: subprocess.CompletedProcess[str]) -> str:
    """Return the most useful output of a failed process."""
    stderr = (result.stderr or "").strip()
    stdout = (result.stdout or "").strip()
    return stderr or stdout


__all__ = ["failure_detail", "run_tool"]
