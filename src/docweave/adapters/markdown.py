"""Markdown to HTML rendering built on Python-Markdown."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import html
import os
from pathlib import Path
import re
from threading import Lock
from typing import Any

import markdown

from docweave.core.exceptions import DocweaveError
from docweave.core.metadata import front_matter_title, split_front_matter
from docweave.core.paths import with_ext


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MarkdownConversionError",
    "MarkdownDocument",
    "markdown_to_html",
    "normalize_markdown_extensions",
    "render_markdown",
    "wrap_html_page",
]


DEFAULT_MARKDOWN_EXTENSIONS = ["extra", "toc", "codehilite", "smarty"]

DEFAULT_EXTENSION_CONFIGS: dict[str, dict[str, object]] = {
    "codehilite": {"css_class": "highlight", "guess_lang": False},
}

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


class MarkdownConversionError(DocweaveError):
    """Raised when Markdown cannot be converted into HTML."""


@dataclass(slots=True)
class MarkdownDocument:
    """Result of converting Markdown into HTML."""

    html: str
    front_matter: dict[str, Any]

    @property
    def title(self) -> str | None:
        return front_matter_title(self.front_matter)


class _MarkdownCacheEntry:
    __slots__ = ("lock", "processor")

    def __init__(self, processor: Any) -> None:
        self.processor = processor
        self.lock = Lock()


_MARKDOWN_CACHE: dict[tuple[str, ...], _MarkdownCacheEntry] = {}
_MARKDOWN_CACHE_GUARD = Lock()


def normalize_markdown_extensions(values: Iterable[str] | str | None) -> list[str]:
    """Normalise extension names from CLI-friendly strings into a flat list."""
    if values is None:
        return []
    candidates: Iterable[str] = [values] if isinstance(values, str) else values

    normalized: list[str] = []
    seen: set[str] = set()
    for value in candidates:
        if not isinstance(value, str):
            continue
        for chunk in re.split(r"[,\s]+", value):
            if chunk and chunk.lower() not in seen:
                seen.add(chunk.lower())
                normalized.append(chunk)
    return normalized


def render_markdown(source: str, extensions: Sequence[str] | None = None) -> MarkdownDocument:
    """Convert Markdown source into HTML while collecting front matter."""
    metadata, body = split_front_matter(source)
    active = tuple(
        normalize_markdown_extensions(
            DEFAULT_MARKDOWN_EXTENSIONS if extensions is None else extensions
        )
    )
    entry = _resolve_markdown_entry(active)
    try:
        with entry.lock:
            entry.processor.reset()
            rendered = entry.processor.convert(body)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc
    return MarkdownDocument(html=rendered, front_matter=metadata)


def wrap_html_page(body: str, title: str | None = None) -> str:
    """Wrap an HTML fragment into a minimal standalone page."""
    return _PAGE_TEMPLATE.format(title=html.escape(title or ""), body=body)


def markdown_to_html(
    input: str | os.PathLike[str],
    output: str | os.PathLike[str] | None = None,
    extensions: Sequence[str] | None = None,
) -> Path:
    """Render a Markdown file into a standalone HTML page and return its path."""
    source = Path(input)
    target = with_ext(output if output is not None else source, "html")
    document = render_markdown(source.read_text(encoding="utf-8"), extensions)
    title = document.title or source.stem
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(wrap_html_page(document.html, title), encoding="utf-8")
    return target


def _resolve_markdown_entry(extensions: tuple[str, ...]) -> _MarkdownCacheEntry:
    entry = _MARKDOWN_CACHE.get(extensions)
    if entry is not None:
        return entry
    with _MARKDOWN_CACHE_GUARD:
        entry = _MARKDOWN_CACHE.get(extensions)
        if entry is None:
            entry = _MarkdownCacheEntry(_build_markdown_processor(extensions))
            _MARKDOWN_CACHE[extensions] = entry
    return entry


def _build_markdown_processor(extensions: tuple[str, ...]) -> Any:
    extension_configs = {
        name: dict(DEFAULT_EXTENSION_CONFIGS[name])
        for name in extensions
        if name in DEFAULT_EXTENSION_CONFIGS
    }
    try:
        return markdown.Markdown(extensions=list(extensions), extension_configs=extension_configs)
    except Exception as exc:
        raise MarkdownConversionError(f"Failed to initialize Markdown processor: {exc}") from exc
