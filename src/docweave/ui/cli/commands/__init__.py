"""CLI command implementations."""

from __future__ import annotations

from .build import html, pandoc, pdf, rst2pdf
from .publish import post
from .themes import themes
from .watch import watch


__all__ = ["html", "pandoc", "pdf", "post", "rst2pdf", "themes", "watch"]
