"""LaTeX compilation helpers (latexmk, Tectonic, log parsing)."""

from __future__ import annotations

from .engines import (
    DEFAULT_ENGINE,
    EngineChoice,
    EngineCommand,
    EngineResult,
    build_engine_command,
    clean_intermediates,
    missing_dependencies,
    resolve_engine,
    run_engine_command,
)
from .log import LatexMessage, LatexMessageSeverity, parse_latex_log


__all__ = [
    "DEFAULT_ENGINE",
    "EngineChoice",
    "EngineCommand",
    "EngineResult",
    "LatexMessage",
    "LatexMessageSeverity",
    "build_engine_command",
    "clean_intermediates",
    "missing_dependencies",
    "parse_latex_log",
    "resolve_engine",
    "run_engine_command",
]
