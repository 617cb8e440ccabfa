"""Public CLI exports for docweave."""

from __future__ import annotations

from .app import app, main
from .commands import html, pandoc, pdf, post, rst2pdf, themes, watch
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "html",
    "main",
    "pandoc",
    "pdf",
    "post",
    "rst2pdf",
    "themes",
    "watch",
]
