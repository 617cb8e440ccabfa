"""Public conversion API."""

from __future__ import annotations

from .conversion import (
    DEFAULT_POST_TITLE,
    compile_document,
    compile_pdf,
    convert_document,
    publish_post,
    render_html,
    render_pdf,
)


__all__ = [
    "DEFAULT_POST_TITLE",
    "compile_document",
    "compile_pdf",
    "convert_document",
    "publish_post",
    "render_html",
    "render_pdf",
]
