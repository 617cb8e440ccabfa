"""Syntax-highlighting themes backed by the Pygments style catalogue."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pygments import highlight
from pygments.formatters import HtmlFormatter, LatexFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.styles import get_all_styles, get_style_by_name
from pygments.util import ClassNotFound

from docweave.core.exceptions import DocweaveError


ThemeFormat = Literal["latex", "html"]


class ThemeNotFoundError(DocweaveError, LookupError):
    """Raised when a highlighting theme is not known to Pygments."""


@dataclass(slots=True)
class HighlightTheme:
    """Colour data of a highlighting theme."""

    name: str
    background: str | None
    highlight: str | None
    tokens: dict[str, str] = field(default_factory=dict)


def list_themes() -> list[str]:
    """Return the names of every available theme, sorted."""
    return sorted(get_all_styles())


def _load_style(name: str) -> type:
    try:
        return get_style_by_name(name)
    except ClassNotFound as exc:
        raise ThemeNotFoundError(
            f"Unknown highlighting theme '{name}'. Run 'docweave themes' to list them."
        ) from exc


def get_theme(name: str) -> HighlightTheme:
    """Return the colours defined by theme ``name``."""
    style = _load_style(name)
    tokens: dict[str, str] = {}
    for token_type, definition in style:
        color = definition.get("color")
        if color:
            tokens[str(token_type)] = f"#{color}"
    return HighlightTheme(
        name=name,
        background=getattr(style, "background_color", None),
        highlight=getattr(style, "highlight_color", None),
        tokens=tokens,
    )


def theme_definitions(name: str, fmt: ThemeFormat = "latex", *, commandprefix: str = "PY") -> str:
    """Return LaTeX macros or CSS rules implementing theme ``name``."""
    _load_style(name)
    if fmt == "html":
        return HtmlFormatter(style=name).get_style_defs(".highlight")
    if fmt == "latex":
        return LatexFormatter(style=name, commandprefix=commandprefix).get_style_defs()
    raise ValueError(f"Unsupported theme format '{fmt}' (expected 'latex' or 'html').")


class ThemeHighlighter:
    """Render source code with a given theme."""

    def __init__(self, *, theme: str = "default", commandprefix: str = "PY") -> None:
        _load_style(theme)
        self.theme = theme
        self.commandprefix = commandprefix

    def render(self, code: str, language: str, fmt: ThemeFormat = "html") -> tuple[str, str]:
        """Return the highlighted code and the matching style definitions."""
        try:
            lexer = get_lexer_by_name(language or "text")
        except ClassNotFound:
            lexer = TextLexer()

        if fmt == "latex":
            formatter: HtmlFormatter | LatexFormatter = LatexFormatter(
                full=False, style=self.theme, commandprefix=self.commandprefix
            )
            return highlight(code, lexer, formatter), formatter.get_style_defs()
        formatter = HtmlFormatter(style=self.theme, cssclass="highlight")
        return highlight(code, lexer, formatter), formatter.get_style_defs(".highlight")


__all__ = [
    "HighlightTheme",
    "ThemeHighlighter",
    "ThemeNotFoundError",
    "get_theme",
    "list_themes",
    "theme_definitions",
]
